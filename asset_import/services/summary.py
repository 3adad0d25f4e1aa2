from __future__ import annotations

from ..models.processing_result import ImportResult

"""SUMMARY line rendering.

Format::

    SUMMARY entity=<kind> file=<name> sheet=<name> rows=<n> valid=<n> invalid=<n>
    blank=<n> committed=<n> mode=<commit_mode> elapsed_sec=<s>
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
]


def format_seconds(seconds: float) -> str:
    """Integral values without decimals; tiny values without scientific notation."""
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line for one import.

    >>> from asset_import.models.entity import CommitMode, EntityKind
    >>> r = ImportResult(EntityKind.ROUTER, "r.xlsx", "Sheet1", CommitMode.SKIP_INVALID,
    ...                  total_rows=3, valid_rows=2, invalid_rows=1, blank_rows=0, committed=True)
    >>> render_summary_line(r)  # doctest: +ELLIPSIS
    'SUMMARY entity=router file=r.xlsx sheet=Sheet1 rows=3 valid=2 invalid=1 blank=0 committed=0 ...'
    """
    return (
        f"SUMMARY entity={result.entity.value} "
        f"file={result.file_name} "
        f"sheet={result.sheet_name} "
        f"rows={result.total_rows} "
        f"valid={result.valid_rows} "
        f"invalid={result.invalid_rows} "
        f"blank={result.blank_rows} "
        f"committed={result.committed_rows} "
        f"mode={result.commit_mode.value} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )
