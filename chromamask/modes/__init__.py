"""Invocation modes; every submodule registers its modes on import."""
