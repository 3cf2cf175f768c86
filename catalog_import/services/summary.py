from __future__ import annotations

from ..models.distribution import DistributionPlan, DistributionReport
from ..models.import_result import ImportResult

"""SUMMARY line rendering.

Formats:
SUMMARY products={n} variants={n} errors={n} skipped_rows={n} committed={yes|no} elapsed_sec={s}
SUMMARY allocations={n} applied={n} failed={n} elapsed_sec={s}
SUMMARY files={n} rows={n} errors={n} elapsed_sec={s}
"""


def _format_seconds(elapsed: float) -> str:
    if elapsed == 0:
        return "0"
    if elapsed == int(elapsed):
        return str(int(elapsed))
    if elapsed < 0.01:
        # avoid scientific notation for very small numbers
        return f"{elapsed:.6f}".rstrip("0").rstrip(".")
    return f"{elapsed:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ImportResult, committed: bool, elapsed_seconds: float) -> str:
    """Render the import SUMMARY line.

    Examples:
        >>> r = ImportResult(products=(), errors=(), product_count=3, variant_count=2)
        >>> render_summary_line(r, True, 2.0)
        'SUMMARY products=3 variants=2 errors=0 skipped_rows=0 committed=yes elapsed_sec=2'
    """
    return (
        f"SUMMARY products={result.product_count} "
        f"variants={result.variant_count} "
        f"errors={len(result.errors)} "
        f"skipped_rows={len(result.skipped_rows)} "
        f"committed={'yes' if committed else 'no'} "
        f"elapsed_sec={_format_seconds(elapsed_seconds)}"
    )


def render_distribution_summary(plan: DistributionPlan, report: DistributionReport, elapsed_seconds: float) -> str:
    return (
        f"SUMMARY allocations={len(plan)} "
        f"applied={len(report.applied)} "
        f"failed={len(report.failures)} "
        f"elapsed_sec={_format_seconds(elapsed_seconds)}"
    )


def render_export_summary(files: int, rows: int, errors: int, elapsed_seconds: float) -> str:
    return f"SUMMARY files={files} rows={rows} errors={errors} elapsed_sec={_format_seconds(elapsed_seconds)}"
