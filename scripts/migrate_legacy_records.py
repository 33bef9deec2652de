#!/usr/bin/env python3
"""Emit SQL that backfills moderation and default fields on records written before moderation existed."""

from __future__ import annotations

import argparse
import re
import sys

TABLE_RE = re.compile(r"^[a-z_][a-z0-9_]*$")

# Defaults merged underneath existing values, so present keys always win.
KIND_DEFAULTS: dict[str, str] = {
    "job": (
        "jsonb_build_object("
        "'status', 'approved', 'type', 'Full-time', 'category', 'dev', "
        "'remote', false, 'hasEquities', false, 'acceptsRecruiters', false, "
        "'tags', '[]'::jsonb, 'companyTokens', '[]'::jsonb)"
    ),
    "talent": (
        "jsonb_build_object("
        "'status', 'approved', 'availability', 'Available', 'skills', '[]'::jsonb)"
    ),
}


def render_sql(*, kinds: list[str], table: str) -> str:
    statements = [
        "-- Legacy record backfill SQL",
        "-- Safe to re-run: only keys that are missing are filled in.",
        "",
    ]
    for kind in kinds:
        prefix = f"'{kind}:%'"
        statements.append(
            f"""update {table}
set value = {KIND_DEFAULTS[kind]} || value
where key like {prefix}
  and jsonb_typeof(value) = 'object';
"""
        )
        statements.append(
            f"""update {table}
set value = value || jsonb_build_object('ownerId', value->'userId')
where key like {prefix}
  and jsonb_typeof(value) = 'object'
  and value ? 'userId'
  and not value ? 'ownerId';
"""
        )
    return "\n".join(statements)


def main() -> int:
    parser = argparse.ArgumentParser(description="Emit SQL to backfill legacy job and talent records.")
    parser.add_argument(
        "--kind",
        action="append",
        choices=sorted(KIND_DEFAULTS),
        help="Record kind to backfill (repeatable, defaults to all kinds)",
    )
    parser.add_argument(
        "--table",
        default="kv_store",
        help="Record table holding key/value rows",
    )
    args = parser.parse_args()

    if not TABLE_RE.match(args.table):
        print(f"invalid table name: {args.table!r}", file=sys.stderr)
        return 2

    kinds = args.kind or sorted(KIND_DEFAULTS)
    print(render_sql(kinds=list(dict.fromkeys(kinds)), table=args.table))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
