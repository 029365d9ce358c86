#!/usr/bin/env python3
"""Command-line interface for the shader IR builder."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from shaderir import BuilderConfig, BuilderSession, IRBuildError, validate_program
from shaderir.samples import build_fragment_shader
from shaderir.serialize import serialize_program


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with builder settings (capacity, growth, header)",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Write the disassembly here instead of standard output",
    )
    parser.add_argument(
        "--json-out",
        type=Path,
        default=None,
        help="Also write the instruction pool as JSON",
    )
    parser.add_argument(
        "--no-header",
        action="store_true",
        help="Omit the GLOBALS capacity header from the listing",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args()


def load_config(args: argparse.Namespace) -> BuilderConfig:
    if args.config is None:
        return BuilderConfig()
    if not args.config.exists():
        raise SystemExit(f"missing config file: {args.config}")
    try:
        return BuilderConfig.load(args.config)
    except ValueError as exc:
        raise SystemExit(f"invalid config file {args.config}: {exc}") from exc


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args)

    try:
        session = build_fragment_shader(BuilderSession(config))
        instructions = session.finish()
        validate_program(instructions).raise_for_issues()
    except IRBuildError as exc:
        raise SystemExit(f"ir build failed: {exc}") from exc

    header = config.header and not args.no_header
    listing = session.disassemble(header=header)
    if args.out is None:
        sys.stdout.write(listing)
    else:
        args.out.write_text(listing, "utf-8")
        print(f"ir written to {args.out}")

    if args.json_out is not None:
        payload = serialize_program(instructions)
        args.json_out.write_text(json.dumps(payload, indent=2), "utf-8")
        print(f"json written to {args.json_out}")


if __name__ == "__main__":
    main()
