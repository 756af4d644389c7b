"""Headless data tool for MindCanvas.

Works on the persisted node slot without starting GTK.

Usage:
  mindcanvas-data export --out mindmap.json
  mindcanvas-data show
  mindcanvas-data verify
  mindcanvas-data clear --yes
"""

from __future__ import annotations

import argparse
import json
from collections import Counter
from pathlib import Path

from mindcanvas import configure_logging
from mindcanvas.database import Database, NodeRepository, get_db_path
from mindcanvas.export import export_json
from mindcanvas.store import Node, NodeStore


def _open_repository() -> NodeRepository | None:
    db_path = get_db_path()
    if not db_path.exists():
        print(f"No DB found at {db_path}")
        return None
    return NodeRepository(Database(db_path))


def _outline(store: NodeStore) -> list[str]:
    lines: list[str] = []

    def add_node(node: Node, depth: int):
        lines.append(f"{'  ' * depth}- {node.text}")
        for child in store.children_of(node.id):
            add_node(child, depth + 1)

    for root in store.roots():
        add_node(root, 0)
    return lines


def _valid_id(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_records(records) -> list[str]:
    """Return a list of consistency problems in raw persisted records."""
    if not isinstance(records, list):
        return ["stored value is not a list"]

    problems = []
    objects = [r for r in records if isinstance(r, dict)]
    if len(objects) != len(records):
        problems.append("some records are not objects")

    ids = []
    for record in objects:
        if _valid_id(record.get("id")):
            ids.append(record["id"])
        else:
            problems.append(f"node has invalid id {record.get('id')!r}")

    for node_id, count in Counter(ids).items():
        if count > 1:
            problems.append(f"duplicate id {node_id} ({count} records)")

    known = set(ids)
    for record in objects:
        parent_id = record.get("parentId")
        if parent_id is not None:
            if not _valid_id(parent_id):
                problems.append(f"node {record.get('id')!r} has invalid parent id {parent_id!r}")
            elif parent_id not in known:
                problems.append(f"node {record.get('id')} points at missing parent {parent_id}")
        if not str(record.get("text", "")).strip():
            problems.append(f"node {record.get('id')} has empty text")
    return problems


def _cmd_export(args: argparse.Namespace) -> int:
    repo = _open_repository()
    if repo is None:
        return 2
    out_path = Path(args.out).expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(export_json(repo.load()), encoding="utf-8")
    repo.db.close()
    print(f"Wrote snapshot: {out_path}")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    repo = _open_repository()
    if repo is None:
        return 2
    store = repo.load_store()
    repo.db.close()
    if not len(store):
        print("(empty map)")
        return 0
    for line in _outline(store):
        print(line)
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    repo = _open_repository()
    if repo is None:
        return 2
    raw = repo.db.get_raw(repo.slot)
    repo.db.close()

    print("Local MindCanvas data verification")
    print(f"  DB: {get_db_path()}")
    if raw is None:
        print("  Nodes: 0 (nothing saved yet)")
        return 0

    try:
        records = json.loads(raw)
    except json.JSONDecodeError as exc:
        print(f"  Stored nodes are not valid JSON: {exc}")
        return 1

    problems = check_records(records)
    count = len(records) if isinstance(records, list) else 0
    print(f"  Nodes: {count}")
    for problem in problems:
        print(f"  Problem: {problem}")
    print(f"  Status: {'OK' if not problems else 'INCONSISTENT'}")
    return 0 if not problems else 1


def _cmd_clear(args: argparse.Namespace) -> int:
    if not args.yes:
        print("Refusing to clear without --yes")
        return 1
    repo = _open_repository()
    if repo is None:
        return 2
    repo.save([])
    repo.db.close()
    print("Cleared all nodes")
    return 0


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    parser = argparse.ArgumentParser(prog="mindcanvas-data")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_exp = sub.add_parser("export", help="Write a JSON snapshot of the map")
    p_exp.add_argument("--out", required=True, help="Output .json path")
    p_exp.set_defaults(func=_cmd_export)

    p_show = sub.add_parser("show", help="Print the map as an outline")
    p_show.set_defaults(func=_cmd_show)

    p_ver = sub.add_parser("verify", help="Check stored nodes for consistency")
    p_ver.set_defaults(func=_cmd_verify)

    p_clr = sub.add_parser("clear", help="Remove every node")
    p_clr.add_argument("--yes", action="store_true", help="Confirm clearing the map")
    p_clr.set_defaults(func=_cmd_clear)

    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
