#!/usr/bin/env python3
"""Emit deterministic SQL that merges admin emails into the ``admin:emails`` record."""

from __future__ import annotations

import argparse
import re
import sys

TABLE_RE = re.compile(r"^[a-z_][a-z0-9_]*$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _quote_sql(value: str) -> str:
    escaped = value.replace("'", "''")
    return f"'{escaped}'"


def _json_array(values: list[str]) -> str:
    return "[" + ", ".join(f'"{value}"' for value in values) + "]"


def normalize_emails(raw_emails: list[str]) -> list[str]:
    emails: list[str] = []
    for raw in raw_emails:
        email = raw.strip().lower()
        if not EMAIL_RE.match(email) or '"' in email or "\\" in email:
            raise ValueError(f"invalid email: {raw!r}")
        if email not in emails:
            emails.append(email)
    return emails


def render_sql(*, emails: list[str], table: str) -> str:
    emails_value = _quote_sql(_json_array(emails))

    return f"""-- Admin registry bootstrap SQL
-- Run this in the Supabase SQL editor (or equivalent privileged Postgres session).
-- Existing admins are kept; the emails below are merged in.

insert into {table} (key, value)
values ('admin:emails', {emails_value}::jsonb)
on conflict (key) do update
set value = (
    select coalesce(jsonb_agg(distinct merged.email), '[]'::jsonb)
    from jsonb_array_elements_text(
        case when jsonb_typeof({table}.value) = 'array' then {table}.value else '[]'::jsonb end
        || excluded.value
    ) as merged(email)
);
"""


def main() -> int:
    parser = argparse.ArgumentParser(description="Emit SQL to bootstrap admin emails in the record table.")
    parser.add_argument(
        "--email",
        action="append",
        required=True,
        help="Admin email to add (repeatable)",
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
    try:
        emails = normalize_emails(args.email)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    print(render_sql(emails=emails, table=args.table))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
