#!/usr/bin/env python3
from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import Dict, List, Mapping, Optional

from chromamask.config import Settings
from chromamask.errors import ChromaError, OutputError, install_global_exception_hooks
from chromamask.io_utils import (
    FILTERS, PATTERNS, DirectoryMaskSource, MaskSource,
    from_buffer, load_image, make_output_path, save_png, to_buffer,
)
from chromamask.logconf import setup_logging
from chromamask.modes_core import ModeMeta, discover_modes, get_mode

logger = logging.getLogger("chromamask")


def _common_options() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(add_help=False)
    p.add_argument("--filters-dir", help="directory holding filter masks (default: filters)")
    p.add_argument("--patterns-dir", help="directory holding pattern masks (default: patterns)")
    p.add_argument("--workers", type=int, help="threads used to map the image (default: 1)")
    p.add_argument("--no-overwrite", action="store_true", help="fail instead of replacing an existing output")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    p.add_argument("--log-dir", help="also log to a rotating file and write crash dumps here")
    return p


def build_parser(modes: Dict[str, ModeMeta]) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="chromamask",
        description="Simulate colour-vision deficiencies and tiled channel patterns on an image (outputs PNG).",
    )
    common = _common_options()
    sub = ap.add_subparsers(dest="mode", metavar="MODE", required=True)
    for meta in modes.values():
        p = sub.add_parser(meta.name, aliases=list(meta.aliases), parents=[common], help=meta.help)
        for key, opt in meta.options.items():
            choices = getattr(opt, "choices", None)
            hint = f" ({'/'.join(choices)})" if choices else ""
            p.add_argument(key, metavar=key.upper(), help=opt.help + hint)
        p.add_argument("mask", metavar="MASK", help=f"mask file name under the {meta.mask_kind} directory")
        p.add_argument("image", metavar="IMAGE", help="source image")
        p.add_argument("output", metavar="OUTPUT", nargs="?",
                       help="output path (default: derived from mask name and image stem)")
    return ap


def _settings_from(args: argparse.Namespace, environ: Optional[Mapping[str, str]]) -> Settings:
    return Settings.from_env(environ).override(
        filters_dir=args.filters_dir,
        patterns_dir=args.patterns_dir,
        workers=args.workers,
        log_dir=args.log_dir,
        log_level="DEBUG" if args.verbose else None,
        overwrite=False if args.no_overwrite else None,
    )


def process(args: argparse.Namespace, settings: Settings, masks: MaskSource) -> str:
    """Run one invocation; returns the path written."""
    meta = get_mode(args.mode)
    opts = meta.parse_options({k: getattr(args, k, None) for k in meta.options})

    out_path = args.output or make_output_path(args.mask, args.image, *(str(opts[k]) for k in meta.name_parts))
    if not settings.overwrite and os.path.exists(out_path):
        raise OutputError(f"output already exists: {out_path}")

    image = load_image(args.image)
    mask = masks.load(meta.mask_kind, args.mask)
    transform = meta.build(mask, **opts)
    logger.info("%s: %s with mask %s -> %s", meta.name, args.image, mask, out_path)

    buffer = to_buffer(image)
    transform.apply_image(buffer, workers=settings.workers)
    try:
        save_png(from_buffer(buffer, luma=meta.luma_output), out_path, overwrite=settings.overwrite)
    except OSError as e:
        raise OutputError(f"cannot write {out_path}: {e}") from e
    return out_path


def run(argv: Optional[List[str]] = None, masks: Optional[MaskSource] = None,
        environ: Optional[Mapping[str, str]] = None, install_hooks: bool = False) -> int:
    """Embeddable entry point; returns the exit status.

    ``install_hooks`` replaces the process-wide sys/threading excepthooks
    (when a log dir is configured); only the console script asks for that.
    """
    ap = build_parser(discover_modes())
    args = ap.parse_args(argv)

    try:
        settings = _settings_from(args, environ)
    except ChromaError as e:
        setup_logging()
        logger.error("%s", e)
        return 2

    setup_logging(getattr(logging, settings.log_level), settings.log_dir)
    if install_hooks and settings.log_dir:
        install_global_exception_hooks(settings.log_dir)

    if masks is None:
        masks = DirectoryMaskSource({FILTERS: settings.filters_dir, PATTERNS: settings.patterns_dir})
    try:
        process(args, settings, masks)
    except ChromaError as e:
        logger.error("%s", e)
        return 2
    return 0


def main():
    sys.exit(run(install_hooks=True))


if __name__ == "__main__":
    main()
