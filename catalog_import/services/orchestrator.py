from __future__ import annotations

import logging
from pathlib import Path

from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import COMMIT_ALL_OR_NOTHING, COMMIT_PARTIAL, CatalogSettings
from ..models.import_result import ImportResult
from ..tabular.detector import detect_format
from ..tabular.errors import FileRejectedError
from ..tabular.reader import read_payload
from .aggregator import aggregate
from .backends import CatalogBackend
from .grouping import group_rows
from .record_builder import build_group

"""Service orchestration for the catalog import.

import_catalog runs the pure pipeline on an in-memory file:

    detect_format -> validate_header -> parse_rows -> group_rows
        -> build_group (per group) -> aggregate

import_file adds the file read and the error log; submit_import hands the
result to the persistence collaborator according to the commit policy.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """The source file could not be read."""
    pass


def import_catalog(file_name: str, content: bytes | str, settings: CatalogSettings | None = None) -> ImportResult:
    """Run the import pipeline on one file already loaded in memory.

    Raises:
        FileRejectedError: batch-fatal problem (format, header, structure, no data)
    """
    settings = settings or CatalogSettings()
    payload = detect_format(file_name, content)
    sheet = read_payload(payload)

    grouped = group_rows(sheet.rows)
    if grouped.skipped_rows:
        logger.warning(
            "%d row(s) skipped (no REFERENCE and no PRODUCTNAME): %s",
            len(grouped.skipped_rows),
            grouped.skipped_rows,
        )

    outcomes = [build_group(key, rows, settings) for key, rows in grouped.groups.items()]
    result = aggregate(outcomes, grouped.skipped_rows)
    logger.info(
        "file=%s groups=%d products=%d variants=%d errors=%d",
        file_name,
        len(grouped.groups),
        result.product_count,
        result.variant_count,
        len(result.errors),
    )
    return result


def import_file(path: Path, settings: CatalogSettings | None = None, error_log: ErrorLogBuffer | None = None) -> ImportResult:
    """Read ``path`` and import it, recording every error in ``error_log``.

    Raises:
        ProcessingError: the file cannot be read
        FileRejectedError: batch-fatal problem (also recorded with row=-1)
    """
    try:
        content = path.read_bytes()
    except OSError as e:
        raise ProcessingError(f"cannot read {path}: {e}") from e

    try:
        result = import_catalog(path.name, content, settings)
    except FileRejectedError as e:
        if error_log is not None:
            error_log.append(
                ErrorRecord.create(file=path.name, row=-1, error_type=e.error_type, message=str(e))
            )
        raise

    for error in result.errors:
        logger.error("%s", error)
        if error_log is not None:
            error_log.append_row_error(path.name, error)
    return result


def submit_import(result: ImportResult, backend: CatalogBackend, policy: str = COMMIT_PARTIAL) -> bool:
    """Send the successful products to the backend according to ``policy``.

    partial: successes are always sent, failures only reported
    all_or_nothing: nothing is sent when any group failed

    Returns:
        True when a batch was sent
    """
    if policy not in (COMMIT_PARTIAL, COMMIT_ALL_OR_NOTHING):
        raise ValueError(f"unknown commit policy: {policy!r}")
    if not result.products:
        logger.info("nothing to submit")
        return False
    if result.has_errors and policy == COMMIT_ALL_OR_NOTHING:
        logger.warning(
            "commit_policy=all_or_nothing and %d group(s) failed: no product sent",
            len(result.errors),
        )
        return False
    backend.submit_products(result.products)
    logger.info("submitted %d product(s)", len(result.products))
    return True
