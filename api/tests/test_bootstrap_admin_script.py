from __future__ import annotations

import subprocess
import sys
from pathlib import Path


SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "bootstrap_admin.py"


def _run_script(*args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, str(SCRIPT_PATH), *args],
        check=check,
        capture_output=True,
        text=True,
    )


def test_bootstrap_script_merges_normalized_emails() -> None:
    output = _run_script("--email", " Root@Example.com ", "--email", "ops@example.com", "--email", "root@example.com").stdout

    assert "insert into kv_store (key, value)" in output
    assert "values ('admin:emails', '[\"root@example.com\", \"ops@example.com\"]'::jsonb)" in output
    assert "on conflict (key) do update" in output
    assert "jsonb_agg(distinct merged.email)" in output


def test_bootstrap_script_honours_table_name() -> None:
    output = _run_script("--email", "root@example.com", "--table", "records").stdout

    assert "insert into records (key, value)" in output
    assert "jsonb_typeof(records.value)" in output


def test_bootstrap_script_rejects_bad_input() -> None:
    bad_email = _run_script("--email", "root'@example", check=False)
    bad_table = _run_script("--email", "root@example.com", "--table", "kv; drop table x", check=False)

    assert bad_email.returncode == 2
    assert "invalid email" in bad_email.stderr
    assert bad_table.returncode == 2
    assert bad_email.stdout == ""
