from __future__ import annotations

import subprocess
import sys
from pathlib import Path


SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "migrate_legacy_records.py"


def _run_script(*args: str) -> str:
    completed = subprocess.run(
        [sys.executable, str(SCRIPT_PATH), *args],
        check=True,
        capture_output=True,
        text=True,
    )
    return completed.stdout


def test_migration_backfills_all_kinds_by_default() -> None:
    output = _run_script()

    assert "where key like 'job:%'" in output
    assert "where key like 'talent:%'" in output
    assert "'status', 'approved'" in output
    assert "'hasEquities', false" in output
    assert "|| value" in output
    assert "jsonb_build_object('ownerId', value->'userId')" in output


def test_migration_limits_to_requested_kind_and_table() -> None:
    output = _run_script("--kind", "talent", "--table", "records")

    assert "update records" in output
    assert "'talent:%'" in output
    assert "'job:%'" not in output
