"""Decode XML documents into nested mappings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lxml import etree

from brickledger.domain.errors import VendorExportError

if TYPE_CHECKING:
    from lxml.etree import _Element

type XmlValue = str | XmlNode | list[XmlValue]
type XmlNode = dict[str, XmlValue]

TEXT_KEY = "#text"


def _parser(*, encoding: str | None = None) -> etree.XMLParser:
    return etree.XMLParser(
        encoding=encoding,
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def _local_name(tag: str) -> str:
    return etree.QName(tag).localname


def _element_value(element: _Element) -> XmlValue:
    children = [child for child in element if isinstance(child.tag, str)]
    text = (element.text or "").strip()
    if not children and not element.attrib:
        return text

    node: XmlNode = {_local_name(key): str(value) for key, value in element.attrib.items()}
    for child in children:
        key = _local_name(child.tag)
        value = _element_value(child)
        if key not in node:
            node[key] = value
            continue
        existing = node[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            node[key] = [existing, value]
    if text:
        node[TEXT_KEY] = text
    return node


def decode_xml(xml: str | bytes) -> XmlNode:
    """Parse ``xml`` into ``{root_tag: value}``.

    Repeated child elements become lists, attributes become plain keys and the
    text of an element that also has attributes or children is kept under
    ``#text``. Entity expansion and network access are disabled.
    """

    if isinstance(xml, str):
        if not xml.strip():
            raise VendorExportError("Vendor export is empty")
        # the str is already decoded; ignore any encoding declaration it carries
        payload = xml.encode("utf-8")
        parser = _parser(encoding="utf-8")
    else:
        if not xml.strip():
            raise VendorExportError("Vendor export is empty")
        payload = xml
        parser = _parser()

    try:
        root = etree.fromstring(payload, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise VendorExportError(f"Vendor export is not valid XML: {exc}") from exc
    return {_local_name(root.tag): _element_value(root)}
