"""
Unified Order Parameter Set

Holds request/response fields keyed by wire name and produces the
deterministic field ordering used for signing. Values are checked once,
when they are added, instead of being type-asserted at every access.
"""
import json
import secrets
import string
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from lxml import etree

from ..exceptions import DecodeError, InvalidFieldValueError


XML_ROOT = "xml"

ParamValue = Union[str, int, Dict[str, Any], List[Any]]

# Hardened parser: gateway replies are untrusted input
_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=True)

_NONCE_ALPHABET = string.ascii_letters + string.digits


class TradeType(str, Enum):
    """Transaction variant carried under trade_type."""
    JSAPI = "JSAPI"
    NATIVE = "NATIVE"
    APP = "APP"
    MWEB = "MWEB"


def new_nonce_str(length: int = 32) -> str:
    """Random alphanumeric nonce for the nonce_str field."""
    return "".join(secrets.choice(_NONCE_ALPHABET) for _ in range(length))


def is_empty_value(value: Any) -> bool:
    """Empty string, zero number, None or an empty container."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, int):
        return value == 0
    return len(value) == 0


def format_value(value: ParamValue) -> str:
    """Render a value the way it goes on the wire and into the signature."""
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class ParamSet:
    """
    Mapping from wire field name to value.

    Key order is irrelevant except for sorted_keys(), which is the order
    used at signing time.
    """

    def __init__(self, fields: Optional[Mapping[str, ParamValue]] = None):
        self._fields: Dict[str, ParamValue] = {}
        for key, value in (fields or {}).items():
            self.add(key, value)

    def add(self, key: str, value: ParamValue) -> None:
        """
        Insert or overwrite a field.

        Integral floats (100.0) are stored as int; amounts are integer fen.
        """
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, (str, int, dict, list)):
            raise InvalidFieldValueError(key, value)
        self._fields[key] = value

    def get(self, key: str, default: Optional[ParamValue] = None) -> Optional[ParamValue]:
        return self._fields.get(key, default)

    def has_value(self, key: str) -> bool:
        """True when the key is present with a non-empty value."""
        return key in self._fields and not is_empty_value(self._fields[key])

    def sorted_keys(self) -> List[str]:
        """
        Keys with non-empty values, in byte-lexicographic order.

        Empty fields never take part in the signature.
        """
        keys = [k for k, v in self._fields.items() if not is_empty_value(v)]
        return sorted(keys, key=lambda k: k.encode("utf-8"))

    def copy(self) -> "ParamSet":
        return ParamSet(self._fields)

    def as_dict(self) -> Dict[str, str]:
        """Wire representation: every value rendered as a string."""
        return {k: format_value(v) for k, v in self._fields.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParamSet):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        return f"ParamSet({sorted(self._fields)})"

    # ------------------------------------------------------------------------
    # XML codec
    # ------------------------------------------------------------------------

    def to_xml(self) -> bytes:
        """
        Serialize to the flat <xml><field>value</field>...</xml> document.

        Children are written in sorted key order so the body is stable.
        """
        root = etree.Element(XML_ROOT)
        for key in sorted(self._fields, key=lambda k: k.encode("utf-8")):
            child = etree.SubElement(root, key)
            child.text = format_value(self._fields[key])
        return etree.tostring(root, encoding="utf-8", xml_declaration=False)

    @classmethod
    def from_xml(cls, body: Union[bytes, str]) -> "ParamSet":
        """
        Parse a flat XML document into a ParamSet of string values.

        Raises:
            DecodeError: body is empty or not well-formed XML
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        if not body or not body.strip():
            raise DecodeError("empty response body")
        try:
            root = etree.fromstring(body, parser=_PARSER)
        except etree.XMLSyntaxError as e:
            raise DecodeError(f"malformed XML response: {e}") from e

        params = cls()
        for child in root:
            if not isinstance(child.tag, str):
                # comments and processing instructions
                continue
            params.add(child.tag, child.text or "")
        return params
