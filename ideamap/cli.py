"""Command line tool for ideamap files and the local map store.

Usage:
  ideamap sample --out sample.json
  ideamap show mindmap.json
  ideamap check mindmap.json
  ideamap import mindmap.json --name "Project plan"
  ideamap export 3 --out project.json
  ideamap list --all
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from ideamap import codec
from ideamap.config import EngineSettings
from ideamap.engine import EditEngine
from ideamap.errors import IdeamapError
from ideamap.model import Node
from ideamap.sample import sample_data
from ideamap.storage import MapStore


def format_outline(tree: Node) -> list[str]:
    """Indented text outline of a tree, one node per line."""
    lines: list[str] = []
    stack = [(tree, 0)]
    while stack:
        node, depth = stack.pop()
        extras = [value for value in (node.color, f"{node.font_size}px" if node.font_size else None) if value]
        suffix = f"  ({', '.join(extras)})" if extras else ""
        lines.append(f"{'  ' * depth}- {node.label} [{node.id}]{suffix}")
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return lines


def _open_file(path: str) -> EditEngine:
    return EditEngine(EngineSettings.from_env(), codec.load_file(path))


def _store(args: argparse.Namespace) -> MapStore:
    return MapStore(Path(args.db).expanduser() if args.db else None)


def _cmd_sample(args: argparse.Namespace) -> int:
    engine = EditEngine(EngineSettings.from_env(), sample_data())
    path = codec.save_file(args.out, engine.tree)
    print(f"Wrote sample map: {path}")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    engine = _open_file(args.file)
    for line in format_outline(engine.tree):
        print(line)
    print(f"Nodes: {engine.node_count}")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    try:
        engine = _open_file(args.file)
    except IdeamapError as exc:
        print(f"INVALID: {exc}")
        return 2
    print(f"OK: {engine.node_count} nodes")
    return 0


def _cmd_import(args: argparse.Namespace) -> int:
    tree = codec.load_file(args.file)
    store = _store(args)
    try:
        stored = store.create_map(args.name or Path(args.file).stem, tree)
    finally:
        store.close()
    print(f"Imported map {stored.id}: {stored.name}")
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    store = _store(args)
    try:
        stored = store.get_map(args.map_id)
    finally:
        store.close()
    if not stored:
        print(f"No map with id {args.map_id}")
        return 2
    out = args.out or codec.default_filename()
    print(f"Wrote map {stored.id}: {codec.save_file(out, stored.tree)}")
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    store = _store(args)
    try:
        maps = store.get_all_maps(include_archived=args.all)
    finally:
        store.close()
    for stored in maps:
        flag = " (archived)" if stored.is_archived else ""
        print(f"{stored.id}\t{stored.name}{flag}\t{stored.modified_at}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ideamap")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--db", help="Map store database (default: ~/.local/share/ideamap/ideamap.db)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_sample = sub.add_parser("sample", help="Write the sample map to a file")
    p_sample.add_argument("--out", required=True, help="Output .json path")
    p_sample.set_defaults(func=_cmd_sample)

    p_show = sub.add_parser("show", help="Print a map file as an outline")
    p_show.add_argument("file", help="Map .json file")
    p_show.set_defaults(func=_cmd_show)

    p_check = sub.add_parser("check", help="Validate a map file")
    p_check.add_argument("file", help="Map .json file")
    p_check.set_defaults(func=_cmd_check)

    p_imp = sub.add_parser("import", help="Import a map file into the store")
    p_imp.add_argument("file", help="Map .json file")
    p_imp.add_argument("--name", help="Map name (default: file name)")
    p_imp.set_defaults(func=_cmd_import)

    p_exp = sub.add_parser("export", help="Export a stored map to a file")
    p_exp.add_argument("map_id", type=int, help="Id shown by `ideamap list`")
    p_exp.add_argument("--out", help="Output .json path (default: mindmap_<date>.json)")
    p_exp.set_defaults(func=_cmd_export)

    p_list = sub.add_parser("list", help="List stored maps")
    p_list.add_argument("--all", action="store_true", help="Include archived maps")
    p_list.set_defaults(func=_cmd_list)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return int(args.func(args))
    except (IdeamapError, ValueError) as exc:
        print(f"Error: {exc}")
        return 2
    except OSError as exc:
        print(f"Error: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
