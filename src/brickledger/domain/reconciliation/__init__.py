"""Vendor import reconciliation.

Flow:
1) resolve vendor ids against the cross-reference index (with fallbacks)
2) aggregate resolved items per business key
3) commit the batch in one unit of work
"""

from __future__ import annotations

from .aggregate import aggregate_line_items
from .contracts import (
    AggregatedLot,
    CommitResult,
    ImportSummary,
    ResolutionResult,
    ResolvedLineItem,
)
from .engine import ReconciliationEngine
from .notes import combine_notes, merge_notes
from .persist import commit_import
from .policy import (
    integer_color_fallback,
    no_color_fallback,
    parse_leading_int,
    passthrough_part_fallback,
)
from .resolve import CrossReferenceIndex, CrossReferenceResolver

__all__ = [
    "AggregatedLot",
    "CommitResult",
    "CrossReferenceIndex",
    "CrossReferenceResolver",
    "ImportSummary",
    "ReconciliationEngine",
    "ResolutionResult",
    "ResolvedLineItem",
    "aggregate_line_items",
    "combine_notes",
    "commit_import",
    "integer_color_fallback",
    "merge_notes",
    "no_color_fallback",
    "parse_leading_int",
    "passthrough_part_fallback",
]
