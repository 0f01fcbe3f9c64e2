#!/usr/bin/env python3
"""
sleepgraph command line

Builds the power-state diagram for a device sleep-settings document.

Usage:
  python -m sleepgraph build settings.json              # Print graph JSON
  python -m sleepgraph build settings.json -o out.json  # Write graph JSON
  python -m sleepgraph describe settings.json           # Text summary per transition
  python -m sleepgraph records --search truck           # List stored records
  python -m sleepgraph export settings.json -o out.png  # Render diagram to PNG
  python -m sleepgraph show settings.json               # Open interactive viewer

FILE arguments may be a path or the name of a stored record.
"""

import argparse
import json
import os
import sys
from pathlib import Path

from .builder import summarize
from .conditions import describe_conditions
from .config import get_export_path, get_settings_dir
from .document import SettingsDocumentError, build_graph_from_document, load_document
from .records import list_records, record_path


def load_graph(name: str, directory=None):
    """Resolve a file or record name and build its graph.

    Returns (graph, display name).
    """
    path = record_path(name, directory)
    document = load_document(path)
    return build_graph_from_document(document), path.stem


def cmd_build(args) -> int:
    result, _ = load_graph(args.file, args.dir)
    text = json.dumps(result.to_dict(), indent=args.indent, ensure_ascii=False)

    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {len(result.nodes)} nodes, {len(result.edges)} edges to {output}")
    else:
        print(text)
    return 0


def cmd_describe(args) -> int:
    result, name = load_graph(args.file, args.dir)
    print(f"Sleep settings: {name}")
    print()
    for slot, info in summarize(result).items():
        conditions = info["conditions"]
        print(f"{info['source']} -> {info['target']} ({slot})")
        print(f"    {describe_conditions(conditions['and'], conditions['or'], conditions['targ'])}")
        for label in conditions["nonZero"]:
            print(f"    {label}")
    return 0


def cmd_records(args) -> int:
    directory = Path(args.dir) if args.dir else get_settings_dir()
    names = list_records(directory, args.search)
    if not names:
        print(f"No records found in {directory}")
        return 0
    for name in names:
        print(name)
    return 0


def cmd_export(args) -> int:
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from .diagram_view import ExportError, export_png

    result, name = load_graph(args.file, args.dir)
    output = Path(args.output) if args.output else get_export_path(name)
    print(f"Exporting {name}...", end=" ", flush=True)
    try:
        export_png(result, output, scale=args.scale)
    except ExportError as e:
        print("FAILED")
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    print("OK")
    print(f"  {output}")
    return 0


def cmd_show(args) -> int:
    from .diagram_view import show

    result, name = load_graph(args.file, args.dir)
    return show(result, name)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sleepgraph",
        description="Visualize device sleep-settings power-state transitions."
    )
    parser.add_argument(
        "--dir",
        help="Settings record directory (default: SLEEPGRAPH_SETTINGS_DIR or .sleepgraph/settings)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build graph JSON")
    build.add_argument("file", help="Settings file or record name")
    build.add_argument("-o", "--output", help="Write JSON here instead of stdout")
    build.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    build.set_defaults(func=cmd_build)

    describe = sub.add_parser("describe", help="Print transition conditions as text")
    describe.add_argument("file", help="Settings file or record name")
    describe.set_defaults(func=cmd_describe)

    records = sub.add_parser("records", help="List stored settings records")
    records.add_argument("--search", default="", help="Case-insensitive name filter")
    records.set_defaults(func=cmd_records)

    export = sub.add_parser("export", help="Render the diagram to PNG")
    export.add_argument("file", help="Settings file or record name")
    export.add_argument("-o", "--output", help="PNG path (default: export dir)")
    export.add_argument("--scale", type=float, default=2, help="Pixel scale (default: 2)")
    export.set_defaults(func=cmd_export)

    show = sub.add_parser("show", help="Open the interactive diagram")
    show.add_argument("file", help="Settings file or record name")
    show.set_defaults(func=cmd_show)

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        return args.func(args)
    except SettingsDocumentError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
