"""Generic XML tree to JSON conversion.

The mapping follows the element model libxml's SimpleXML binding exposes:
the root element is unnamed, attributes go under "@attributes", repeated
sibling names become arrays, and a child whose content starts with text is
reduced to that text.
"""
import json
import logging
from typing import Any, Dict, Optional, Union

from lxml import etree

ATTRIBUTES_KEY = "@attributes"
TEXT_KEY = "0"
BLANK_CHARACTERS = " \t\r\n"

debug_logger = logging.getLogger('debug')

JSONValue = Union[str, Dict[str, Any]]


class XMLConversionError(Exception):
    """Raised when sanitized text cannot be parsed as XML."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        prefix = f"{source}: " if source else ""
        super().__init__(f"{prefix}{message}")


def _make_parser() -> etree.XMLParser:
    # compact, noblanks and noent as libxml2 options; external entities
    # (SYSTEM file or URL references) are never loaded
    return etree.XMLParser(
        encoding="utf-8",
        compact=True,
        remove_blank_text=True,
        resolve_entities="internal",
        no_network=True,
    )


def parse_xml(text: str, source: Optional[str] = None) -> etree._Element:
    """Parse sanitized text into an element tree.

    Args:
        text: Sanitized XML text
        source: File name used in error messages

    Returns:
        The root element

    Raises:
        XMLConversionError: If the text is empty or not well-formed
    """
    if not text.strip():
        raise XMLConversionError("document is empty", source)
    try:
        root = etree.fromstring(text.encode("utf-8"), parser=_make_parser())
    except etree.XMLSyntaxError as e:
        raise XMLConversionError(f"invalid XML: {e}", source) from e
    if root is None:
        raise XMLConversionError("no root element", source)
    debug_logger.debug(f"Parsed root element <{etree.QName(root).localname}>")
    return root


def _is_blank(text: Optional[str]) -> bool:
    return not text or not text.strip(BLANK_CHARACTERS)


def _local_name(name: str) -> str:
    return etree.QName(name).localname


def _child_elements(element):
    # comments and processing instructions have non-string tags
    return [child for child in element if isinstance(child.tag, str)]


def _text_content(element) -> str:
    """Join the element's own text nodes, skipping nested elements."""
    parts = [element.text or ""]
    parts.extend(child.tail or "" for child in element)
    return "".join(parts)


def _child_value(element) -> JSONValue:
    if not _is_blank(element.text):
        return _text_content(element)
    return _properties(element)


def _properties(element) -> Dict[str, Any]:
    result: Dict[str, Any] = {}

    attributes = {
        name: value
        for name, value in element.attrib.items()
        if not name.startswith("{")
    }
    if attributes:
        result[ATTRIBUTES_KEY] = attributes

    if len(element) == 0 and not _is_blank(element.text):
        result[TEXT_KEY] = element.text

    for child in _child_elements(element):
        name = _local_name(child.tag)
        value = _child_value(child)
        if name not in result:
            result[name] = value
        elif isinstance(result[name], list):
            result[name].append(value)
        else:
            result[name] = [result[name], value]
    return result


def to_json_value(root) -> Dict[str, Any]:
    """Map a parsed document to nested dicts, lists and strings.

    The root element itself is not named; its attributes and children
    become the top-level keys.
    """
    return _properties(root)


def serialize_json(value: Any, ascii_only: bool = True, escape_slashes: bool = True) -> str:
    """Serialize a mapped document as compact JSON text.

    With escape_slashes every "/" is written as "\\/", as PHP json_encode does.
    """
    text = json.dumps(value, ensure_ascii=ascii_only, separators=(",", ":"))
    if escape_slashes:
        # "/" only occurs inside JSON strings here
        text = text.replace("/", "\\/")
    return text


def convert_text(
    text: str,
    ascii_only: bool = True,
    source: Optional[str] = None,
    escape_slashes: bool = True,
) -> str:
    """Parse sanitized XML text and return its JSON serialization."""
    return serialize_json(
        to_json_value(parse_xml(text, source)),
        ascii_only=ascii_only,
        escape_slashes=escape_slashes,
    )
