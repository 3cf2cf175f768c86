from __future__ import annotations

import json
from pathlib import Path

from catalog_import.cli import main as cli_main

KEYS = {"timestamp", "file", "row", "code", "error_type", "message"}


def test_error_log_records_have_fixed_keys(write_config, temp_workdir: Path, make_csv, make_row):
    rows = [make_row(VAT=""), make_row(REFERENCE="PROD002", SELLPRICETAXEXCLUDE="quinze")]
    (temp_workdir / "data" / "catalog.csv").write_text(make_csv(rows), encoding="utf-8")
    assert cli_main(["import", "data/catalog.csv"]) == 2
    log = next((temp_workdir / "logs").glob("errors-*.log"))
    records = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    assert len(records) == 2
    for rec in records:
        assert set(rec) == KEYS
        assert rec["timestamp"].endswith("Z")
        assert rec["file"] == "catalog.csv"
        assert rec["error_type"].isupper()
    assert [r["error_type"] for r in records] == ["MISSING_FIELD", "INVALID_NUMBER"]


def test_file_level_error_uses_row_minus_one(write_config, temp_workdir: Path):
    (temp_workdir / "data" / "catalog.ods").write_bytes(b"PK")
    assert cli_main(["import", "data/catalog.ods"]) == 1
    log = next((temp_workdir / "logs").glob("errors-*.log"))
    rec = json.loads(log.read_text(encoding="utf-8"))
    assert set(rec) == KEYS
    assert rec["row"] == -1
    assert rec["code"] == ""
    assert rec["error_type"] == "UNSUPPORTED_FORMAT"
