from __future__ import annotations
import importlib
import pkgutil
import logging
from typing import Dict, Any, Callable, Sequence, Tuple
from dataclasses import dataclass, field

from chromamask.errors import ArgumentError

logger = logging.getLogger(__name__)

# ---------------- registry & types ----------------
_registry: Dict[str, "ModeMeta"] = {}
_aliases: Dict[str, str] = {}

@dataclass
class Option:
    default: Any
    help: str = ""

    def parse(self, text: str) -> Any:
        return text

class Enum(Option):
    def __init__(self, default, choices: Sequence[str], parse: Callable[[str], Any] = str, help: str = ""):
        super().__init__(default, help); self.choices = list(choices); self._parse = parse
    def parse(self, text: str) -> Any:
        return self._parse(text)

@dataclass
class ModeMeta:
    name: str
    build: Callable[..., Any]          # (mask, **options) -> Transform
    mask_kind: str                     # resource kind the mask name is resolved under
    luma_output: bool
    options: Dict[str, Option]
    aliases: Tuple[str, ...] = ()
    help: str = ""
    # option names whose values appear in the default output file name
    name_parts: Tuple[str, ...] = field(default_factory=tuple)

    def parse_options(self, raw: Dict[str, str]) -> Dict[str, Any]:
        out = {}
        for key, opt in self.options.items():
            if key in raw and raw[key] is not None:
                out[key] = opt.parse(raw[key])
            elif opt.default is None:
                raise ArgumentError(f"mode {self.name!r} is missing the {key!r} argument")
            else:
                out[key] = opt.default
        return out

def mode(name: str, *, mask_kind: str, luma_output: bool, options: Dict[str, Option] = None,
         aliases: Sequence[str] = (), name_parts: Sequence[str] = (), help: str = ""):
    def deco(fn: Callable[..., Any]):
        _registry[name] = ModeMeta(name=name, build=fn, mask_kind=mask_kind, luma_output=luma_output,
                                   options=dict(options or {}), aliases=tuple(aliases),
                                   help=help, name_parts=tuple(name_parts))
        for a in aliases:
            _aliases[a] = name
        return fn
    return deco

# ---------------- discovery ----------------
def _import_modes_package(package: str) -> None:
    """Import the modes package and all of its submodules; surface exceptions."""
    pkg = importlib.import_module(package)
    if hasattr(pkg, "__path__"):
        for m in pkgutil.iter_modules(pkg.__path__):
            importlib.import_module(f"{package}.{m.name}")

def discover_modes(package: str = "chromamask.modes") -> Dict[str, ModeMeta]:
    _import_modes_package(package)
    logger.debug("Modes registered: %d -> %s", len(_registry), sorted(_registry.keys()))
    return dict(_registry)

def get_mode(name: str) -> ModeMeta:
    if not _registry:
        discover_modes()
    key = _aliases.get(name, name)
    try:
        return _registry[key]
    except KeyError:
        known = ", ".join(sorted(_registry))
        raise ArgumentError(f"unexpected mode {name!r} (expected one of: {known})") from None
