from __future__ import annotations

import json

from catalog_import.models.error_record import ErrorRecord
from catalog_import.models.import_result import RowError

KEYS = {"timestamp", "file", "row", "code", "error_type", "message"}


def test_error_record_json_line_has_fixed_keys():
    rec = ErrorRecord.create("catalog.csv", 4, "MISSING_FIELD", "row 4: VAT is required", code="PROD001")
    data = json.loads(rec.to_json_line())
    assert set(data) == KEYS
    assert data["row"] == 4
    assert data["code"] == "PROD001"
    assert data["timestamp"].endswith("Z")


def test_error_record_file_level_defaults():
    rec = ErrorRecord.create("catalog.pdf", -1, "UNSUPPORTED_FORMAT", "unsupported file")
    assert rec.row == -1
    assert rec.code == ""


def test_error_record_keeps_non_ascii():
    rec = ErrorRecord.create("catalogue.csv", 2, "MISSING_FIELD", "Catégorie manquante")
    assert "Catégorie" in rec.to_json_line()


def test_row_error_str():
    assert str(RowError(3, "PROD001", "VAT is required")) == "row 3 [PROD001]: VAT is required"
    assert str(RowError(3, "", "PRODUCTNAME is required")) == "row 3: PRODUCTNAME is required"
    assert RowError(3, "", "x").error_type == "RECORD_BUILD_ERROR"
