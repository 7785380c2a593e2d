from __future__ import annotations

import argparse
import dataclasses
import sys
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path

from .common import BindgenError, write_if_changed
from .config import DEFAULT_CONFIG, GeneratorConfig
from .emitter import emit
from .introspection import generate_metadata
from .metadata import load_metadata_file, load_signatures
from .model import BindingModel, build_model


def generate_source(root: ET.Element, config: GeneratorConfig) -> tuple[str, BindingModel]:
    signatures = load_signatures(root, config)
    model = build_model(signatures, config)
    return emit(model, config), model


def load_metadata(args: argparse.Namespace, config: GeneratorConfig) -> ET.Element:
    if args.metadata:
        return load_metadata_file(Path(args.metadata).resolve())
    with tempfile.TemporaryDirectory(prefix="flex_bindgen_") as temp_dir:
        document = generate_metadata(
            tool=config.introspection_tool,
            native_root=Path(config.native_root).resolve(),
            header=config.header,
            output=Path(temp_dir) / "flex.bs",
        )
        return load_metadata_file(document)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flex_bindgen",
        description="Generate the C# base bindings (base.cs) from the flex native header.",
    )
    parser.add_argument(
        "--flex-root",
        default=DEFAULT_CONFIG.native_root,
        help=f"Directory containing the native header (default: {DEFAULT_CONFIG.native_root}).",
    )
    parser.add_argument("--header", default=DEFAULT_CONFIG.header, help="Native header to introspect.")
    parser.add_argument(
        "--introspection-tool",
        default=DEFAULT_CONFIG.introspection_tool,
        help="BridgeSupport generator executable.",
    )
    parser.add_argument("--metadata", help="Use an existing BridgeSupport document instead of running the generator.")
    parser.add_argument("--out", default=DEFAULT_CONFIG.output_file, help="Output C# file.")
    parser.add_argument("--check", action="store_true", help="Fail with a diff if the output is out of date.")
    parser.add_argument("--dry-run", action="store_true", help="Generate without writing the output file.")
    parser.add_argument("--stdout", action="store_true", help="Print the generated source instead of writing it.")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = dataclasses.replace(
        DEFAULT_CONFIG,
        native_root=args.flex_root,
        header=args.header,
        introspection_tool=args.introspection_tool,
        output_file=args.out,
    )
    try:
        root = load_metadata(args, config)
        content, model = generate_source(root, config)
        if args.stdout:
            sys.stdout.write(content)
            return 0
        out_path = Path(config.output_file).resolve()
        status = write_if_changed(out_path, content, args.check, args.dry_run)
    except BindgenError as exc:
        print(f"flex_bindgen error: {exc}", file=sys.stderr)
        return 1

    if args.check:
        if status == 0:
            print(f"{out_path} is up to date.", file=sys.stderr)
        return status
    if args.dry_run:
        return status

    print(
        f"Generated {out_path}:{len(model.enums)} enums, {len(model.functions)} functions, "
        f"{len(model.delegates)} delegates, {len(model.properties)} properties.",
        file=sys.stderr,
    )
    return status
