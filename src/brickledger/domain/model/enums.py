"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class CatalogSource(StrEnum):
    """Identifier spaces the canonical catalog knows about."""

    REBRICKABLE = "rebrickable"
    BRICKLINK = "bricklink"
    BRICKOWL = "brickowl"


class Condition(StrEnum):
    NEW = "N"
    USED = "U"

    @classmethod
    def parse(cls, value: str | None) -> Condition | None:
        """Accept only ``N``/``U`` (any case); everything else is unspecified."""

        if value is None:
            return None
        normalized = value.strip().upper()
        if normalized == cls.NEW.value:
            return cls.NEW
        if normalized == cls.USED.value:
            return cls.USED
        return None


class ImportMode(StrEnum):
    ADD = "add"
    MERGE = "merge"


class ComponentKind(StrEnum):
    PART = "part"
    MINIFIG = "minifig"
