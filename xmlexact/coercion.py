"""Convert typed scalar values to their XML text and back."""
import base64
import binascii
from typing import Any, Optional, Union

from xmlexact.common import ParseError
from xmlexact.escaping import escape

#: Type tags parsed as :py:class:`float`
FLOAT_TYPES = frozenset(["decimal", "double", "float"])

#: Type tags parsed as :py:class:`int`
INTEGER_TYPES = frozenset(
    [
        "byte",
        "int",
        "integer",
        "long",
        "negativeInteger",
        "nonNegativeInteger",
        "nonPositiveInteger",
        "positiveInteger",
        "short",
        "unsignedByte",
        "unsignedInt",
        "unsignedLong",
        "unsignedShort",
    ]
)

#: Type tags rendered as encoded binary buffers
BINARY_TYPES = frozenset(["base64Binary", "hexBinary"])

#: Type tag of a value which is passed through as raw, unescaped markup
XML_TYPE = "xml"


def scalar_to_text(value: Any) -> str:
    """Represent ``value`` as text without any escaping or encoding."""
    if value is None:
        return ""

    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")

    return str(value)


def _as_bytes(value: Union[str, bytes, bytearray, Any]) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)

    return scalar_to_text(value).encode("utf-8")


def encode(value: Any, type_tag: Optional[str]) -> str:
    """
    Render ``value`` as XML text according to ``type_tag``.

    Binary types are encoded, everything else is escaped. The raw ``xml`` type is
    not handled here as it depends on the indention of the enclosing element.
    """
    if value is None:
        return ""

    if type_tag == "base64Binary":
        return base64.b64encode(_as_bytes(value)).decode("ascii")

    if type_tag == "hexBinary":
        return _as_bytes(value).hex()

    return escape(scalar_to_text(value))


def decode(text: str, type_tag: Optional[str]) -> Any:
    """
    Parse ``text`` into a value according to ``type_tag``.

    Empty text of a numeric type stays an empty string since there is nothing to
    parse.
    """
    if type_tag is None:
        return text

    if type_tag == "boolean":
        return text == "true"

    if type_tag in FLOAT_TYPES:
        if text == "":
            return text
        try:
            return float(text)
        except ValueError as exception:
            raise ParseError(
                f"Expected a {type_tag} number, but got: {text!r}"
            ) from exception

    if type_tag in INTEGER_TYPES:
        if text == "":
            return text
        try:
            return int(text)
        except ValueError as exception:
            raise ParseError(
                f"Expected an {type_tag} number, but got: {text!r}"
            ) from exception

    if type_tag == "base64Binary":
        # NOTE: The lexical space of base64Binary allows whitespace, and the
        # encoded payloads are often wrapped in lines.
        try:
            return base64.b64decode("".join(text.split()), validate=True)
        except binascii.Error as exception:
            raise ParseError(
                f"Expected base64-encoded content, but got: {text!r}"
            ) from exception

    if type_tag == "hexBinary":
        try:
            return bytes.fromhex(text)
        except ValueError as exception:
            raise ParseError(
                f"Expected hex-encoded content, but got: {text!r}"
            ) from exception

    return text
