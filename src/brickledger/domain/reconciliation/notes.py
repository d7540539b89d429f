"""Free-text note handling shared by aggregation and lot merging."""

from __future__ import annotations


def _clean(value: str | None) -> str:
    return (value or "").strip()


def combine_notes(*parts: str | None) -> str | None:
    """Newline-join the non-empty ``parts`` in order."""

    cleaned = [text for text in map(_clean, parts) if text]
    return "\n".join(cleaned) or None


def merge_notes(existing: str | None, incoming: str | None) -> str | None:
    """Append ``incoming`` to ``existing``; an empty side yields the other unchanged."""

    if not existing:
        return incoming or None
    if not incoming:
        return existing
    return f"{existing}\n{incoming}"
