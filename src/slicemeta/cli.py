"""CLI entry point for slicemeta."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from slicemeta.config import ExtractorConfig, load_config
from slicemeta.errors import ArchiveError
from slicemeta.extract import extract_print_metadata
from slicemeta.models import PrintMetadata


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="slicemeta",
        description="Extract print time, filament usage and settings from slicer output",
    )
    sub = parser.add_subparsers(dest="command")

    # Shared args for subcommands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    show_cmd = sub.add_parser(
        "show", parents=[common], help="Show metadata of .gcode / .gcode.3mf files"
    )
    show_cmd.add_argument("files", type=Path, nargs="+", help="Files to inspect")
    show_cmd.add_argument("--json", action="store_true", help="Print JSON instead of a summary")
    show_cmd.add_argument(
        "--config", type=Path, default=None, help="Path to slicemeta.toml"
    )
    show_cmd.add_argument(
        "--name", default=None,
        help="Original file name to use for the duration fallback (single file only)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if args.command == "show":
        _cmd_show(args)


def _cmd_show(args: argparse.Namespace) -> None:
    if args.name and len(args.files) > 1:
        print("error: --name can only be used with a single file", file=sys.stderr)
        sys.exit(1)

    try:
        cfg = load_config(args.config) if args.config else ExtractorConfig()
    except (OSError, ValueError) as exc:
        # tomllib.TOMLDecodeError is a ValueError
        print(f"error: {args.config}: {exc}", file=sys.stderr)
        sys.exit(1)

    results = []
    failed = False
    for path in args.files:
        if not path.exists():
            print(f"error: {path}: file not found", file=sys.stderr)
            failed = True
            continue
        try:
            meta = extract_print_metadata(
                path.read_bytes(), args.name or str(path), config=cfg
            )
        except ArchiveError as exc:
            print(f"error: {path}: {exc}", file=sys.stderr)
            failed = True
            continue
        results.append(meta)
        if not args.json:
            _print_summary(path, meta)

    if args.json:
        payload = [m.to_dict() for m in results]
        print(json.dumps(payload[0] if len(args.files) == 1 and payload else payload, indent=2))

    if failed:
        sys.exit(1)


def _print_summary(path: Path, meta: PrintMetadata) -> None:
    """Print a human readable summary of one file."""
    print(f"\n{path.name}:")
    print(f"  Print time: {meta.print_duration or 'unknown'}")

    if meta.filaments:
        print("  Filaments:")
        type_width = max(len(f.material_type) for f in meta.filaments)
        for i, fil in enumerate(meta.filaments, start=1):
            estimate = " (estimated)" if fil.weight_estimated else ""
            usage = "  ".join(v for v in (fil.length, fil.weight) if v)
            print(
                f"    {i}. {fil.material_type:<{type_width}}  {fil.color}  {usage}{estimate}"
            )
    if meta.total_filament_weight:
        print(f"  Total filament: {meta.total_filament_weight}")

    settings = meta.print_settings
    for label, value in (
        ("Printer", settings.printer_model),
        ("Nozzle", settings.nozzle_diameter and f"{settings.nozzle_diameter}mm"),
        ("Layer height", settings.layer_height and f"{settings.layer_height}mm"),
        ("Infill", settings.infill),
    ):
        if value:
            print(f"  {label}: {value}")
