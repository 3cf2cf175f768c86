from __future__ import annotations

import json
from pathlib import Path

from catalog_import.cli import main as cli_main

"""Import runs where some product groups fail.

Failing groups are reported (stdout + error log) and never block the
successful ones under the default partial commit policy.
"""


def _write_catalog(temp_workdir: Path, make_csv, make_row, variant_rows) -> None:
    rows = [
        make_row(),
        *variant_rows("PROD002", "Sans impact", ("Taille:S", "0", "1"), ("Taille:M", "", "2")),
        make_row(REFERENCE="PROD003", PRODUCTNAME="Sans TVA", VAT=""),
        make_row(REFERENCE="PROD004", PRODUCTNAME="Quatre"),
    ]
    (temp_workdir / "data" / "catalog.csv").write_text(make_csv(rows), encoding="utf-8")


def test_partial_failure_commits_successes(write_config, temp_workdir: Path, capsys, make_csv, make_row, variant_rows):
    _write_catalog(temp_workdir, make_csv, make_row, variant_rows)
    code = cli_main(["import", "data/catalog.csv"])
    out = capsys.readouterr().out
    assert code == 2
    assert "SUMMARY products=2 variants=0 errors=2 skipped_rows=0 committed=yes" in out
    assert "ERROR row 3 [PROD002]: row 4: IMPACTPRICE is required" in out
    assert "ERROR row 5 [PROD003]: row 5: VAT is required" in out

    batch = json.loads(next((temp_workdir / "out").glob("products-*.json")).read_text(encoding="utf-8"))
    assert [p["code"] for p in batch["products"]] == ["PROD001", "PROD004"]

    log = next((temp_workdir / "logs").glob("errors-*.log"))
    records = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    assert [(r["row"], r["code"], r["error_type"]) for r in records] == [
        (3, "PROD002", "MISSING_FIELD"),
        (5, "PROD003", "MISSING_FIELD"),
    ]


def test_all_or_nothing_sends_nothing(write_config, temp_workdir: Path, capsys, make_csv, make_row, variant_rows):
    text = write_config.read_text(encoding="utf-8").replace("commit_policy: partial", "commit_policy: all_or_nothing")
    write_config.write_text(text, encoding="utf-8")
    _write_catalog(temp_workdir, make_csv, make_row, variant_rows)
    code = cli_main(["import", "data/catalog.csv"])
    out = capsys.readouterr().out
    assert code == 2
    assert "committed=no" in out
    assert not list((temp_workdir / "out").glob("products-*.json"))


def test_structural_error_rejects_whole_file(write_config, temp_workdir: Path, capsys, make_csv, make_row):
    text = make_csv([make_row(), make_row(REFERENCE="PROD002")])
    lines = text.splitlines()
    lines[2] = lines[2] + ",en trop"
    (temp_workdir / "data" / "catalog.csv").write_text("\n".join(lines) + "\n", encoding="utf-8")
    code = cli_main(["import", "data/catalog.csv"])
    out = capsys.readouterr().out
    assert code == 1
    assert "row 3: too many fields (19 expected, 20 found)" in out
    assert "SUMMARY" not in out
    assert not (temp_workdir / "out").exists()
