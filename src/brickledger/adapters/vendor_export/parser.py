"""Vendor (BrickStore/BrickLink) XML export parsing."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from brickledger.adapters.vendor_export.decoder import TEXT_KEY, decode_xml
from brickledger.domain.model import Condition, VendorLineItem
from brickledger.domain.reconciliation.policy import parse_leading_int

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from brickledger.adapters.vendor_export.decoder import XmlNode, XmlValue

log = logging.getLogger(__name__)

ITEM_TYPE_ALIASES: tuple[str, ...] = ("itemtypeid", "itemtype", "type")
PART_ID_ALIASES: tuple[str, ...] = ("itemid", "item")
COLOR_ID_ALIASES: tuple[str, ...] = ("colorid", "color")
QUANTITY_ALIASES: tuple[str, ...] = ("qty", "quantity", "qt", "q", "qtty")
CONDITION_ALIASES: tuple[str, ...] = ("condition", "cond")
COMMENTS_ALIASES: tuple[str, ...] = ("comments",)
REMARKS_ALIASES: tuple[str, ...] = ("remarks",)


@dataclass(frozen=True, slots=True)
class ItemPathStrategy:
    """Locate the item list at one fixed element path."""

    path: tuple[str, ...]

    def extract(self, document: XmlNode) -> list[XmlNode] | None:
        current: XmlValue = document
        for step in self.path:
            if not isinstance(current, dict):
                return None
            next_value = _lookup(current, step)
            if next_value is None:
                return None
            current = next_value
        if isinstance(current, list):
            items = [entry for entry in current if isinstance(entry, dict)]
            return items or None
        if isinstance(current, dict):
            return [current]
        return None


ITEM_PATH_STRATEGIES: tuple[ItemPathStrategy, ...] = (
    ItemPathStrategy(("Inventory", "Item")),
    ItemPathStrategy(("Inventory", "Items", "Item")),
    ItemPathStrategy(("Items", "Item")),
    ItemPathStrategy(("BrickStore", "Inventory", "Item")),
    ItemPathStrategy(("BrickStore", "Items", "Item")),
    ItemPathStrategy(("BrickStoreXML", "Inventory", "Item")),
    ItemPathStrategy(("BrickStoreXML", "Items", "Item")),
)


def _lookup(node: Mapping[str, XmlValue], key: str) -> XmlValue | None:
    if key in node:
        return node[key]
    lowered = key.lower()
    for candidate, value in node.items():
        if candidate.lower() == lowered:
            return value
    return None


def _scalar(value: XmlValue | None) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        text = value.get(TEXT_KEY, "")
        return text.strip() if isinstance(text, str) else ""
    if isinstance(value, list):
        # a repeated leaf; the first occurrence counts
        return _scalar(value[0]) if value else ""
    return value.strip()


def _field(fields: Mapping[str, str], aliases: Sequence[str]) -> str | None:
    for alias in aliases:
        if alias in fields:
            return fields[alias]
    return None


def _lowercase_fields(item: XmlNode) -> dict[str, str]:
    fields: dict[str, str] = {}
    for key, value in item.items():
        # later duplicates of a key differing only in case win
        fields[key.lower()] = _scalar(value)
    return fields


def find_items(
    document: XmlNode,
    strategies: Sequence[ItemPathStrategy] = ITEM_PATH_STRATEGIES,
) -> list[XmlNode]:
    for strategy in strategies:
        items = strategy.extract(document)
        if items:
            log.debug("Found %d items at %s", len(items), "/".join(strategy.path))
            return items
    return []


def parse_line_item(item: XmlNode) -> VendorLineItem | None:
    """Normalize one raw item; ``None`` means the row is dropped."""

    fields = _lowercase_fields(item)
    part_id = _field(fields, PART_ID_ALIASES) or ""
    color_id = _field(fields, COLOR_ID_ALIASES) or ""
    quantity = parse_leading_int(_field(fields, QUANTITY_ALIASES))
    if not part_id or not color_id or quantity is None or quantity <= 0:
        log.debug(
            "Dropping vendor row (part=%r color=%r quantity=%r)", part_id, color_id, quantity
        )
        return None
    return VendorLineItem(
        item_type=_field(fields, ITEM_TYPE_ALIASES) or None,
        vendor_part_id=part_id,
        vendor_color_id=color_id,
        quantity=quantity,
        condition=Condition.parse(_field(fields, CONDITION_ALIASES)),
        comments=_field(fields, COMMENTS_ALIASES) or None,
        remarks=_field(fields, REMARKS_ALIASES) or None,
    )


def parse_vendor_export(
    xml: str | bytes,
    *,
    strategies: Sequence[ItemPathStrategy] = ITEM_PATH_STRATEGIES,
) -> list[VendorLineItem]:
    """Parse a BrickStore/BrickLink XML export into normalized line items."""

    document = decode_xml(xml)
    raw_items = find_items(document, strategies)
    line_items = [
        line_item for line_item in map(parse_line_item, raw_items) if line_item is not None
    ]
    dropped = len(raw_items) - len(line_items)
    if dropped:
        log.debug("Dropped %d malformed vendor rows", dropped)
    return line_items


_URI_SUFFIX = re.compile(r"[?#]")
_PATH_SEPARATOR = re.compile(r"[\\/]")


def derive_file_name(uri: str) -> str | None:
    """Return the last path segment of ``uri`` without query or fragment."""

    without_query = _URI_SUFFIX.split(uri, maxsplit=1)[0]
    last = _PATH_SEPARATOR.split(without_query)[-1]
    return last or None
