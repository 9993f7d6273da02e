"""Guess a definition from a sample XML document."""
import copy
import re
from typing import Any, Dict, List, Mapping, Optional, Union

from xmlexact.definition import is_metadata_key
from xmlexact.deserialization import from_xml
from xmlexact.node import NAMESPACE_KEY
from xmlexact.options import FromXmlOptions

# NOTE: The order of the patterns matters. The first match wins so that, for
# example, a long run of digits is an integer rather than a hex string.
_PATTERNS = [
    (re.compile(r"^(true|false)$"), "boolean"),
    (re.compile(r"^\d+$"), "int"),
    (re.compile(r"^\d+\.\d+$"), "float"),
    (re.compile(r"^[0-9A-Fa-f]{8,}$"), "hexBinary"),
    (
        re.compile(
            r"^([A-Za-z0-9+/]{4})*"
            r"([A-Za-z0-9+/]{4}|[A-Za-z0-9+/]{3}=|[A-Za-z0-9+/]{2}==)$"
        ),
        "base64Binary",
    ),
]


def guess_type(value: Any) -> Optional[str]:
    """
    Guess the type tag of a sample scalar ``value``.

    Return None if there is not enough information to guess the type.

    >>> guess_type("1.00")
    'float'

    >>> guess_type("deadbeef")
    'hexBinary'

    >>> guess_type("hello world")
    'string'
    """
    if value is None or value == "":
        return None

    if isinstance(value, bool):
        return "boolean"

    if isinstance(value, int):
        return "int"

    if isinstance(value, float):
        return "float"

    if isinstance(value, (bytes, bytearray)):
        return "base64Binary"

    text = str(value)
    for pattern, type_tag in _PATTERNS:
        if pattern.match(text):
            return type_tag

    return "string"


def infer_from_object(obj: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Infer the definition from an object parsed with grouped attributes.

    The metadata keys (``child$order``, ``child$attributes``, ``child$namespace``)
    are carried over as they are. The arrays are inferred from their first item.
    """
    definition = dict()  # type: Dict[str, Any]

    for key, value in obj.items():
        if key.startswith("$") or key == NAMESPACE_KEY:
            continue

        if is_metadata_key(key):
            definition[key] = copy.deepcopy(value)

        elif isinstance(value, (list, tuple)):
            item_types = []  # type: List[Any]
            definition[f"{key}$type"] = item_types

            if len(value) > 0:
                item_definition = infer_from_object({key: value[0]})
                if f"{key}$type" in item_definition:
                    item_types.append(item_definition[f"{key}$type"])
                elif key in item_definition:
                    definition[key] = item_definition[key]

        elif isinstance(value, Mapping):
            definition[key] = infer_from_object(value)

        else:
            type_tag = guess_type(value)
            if type_tag is not None:
                definition[f"{key}$type"] = type_tag

    return definition


def infer_from_xml(xml_or_obj: Union[str, bytes, Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Infer the definition from a sample XML document.

    The sample is parsed without type conversion and with the attributes grouped
    next to the elements so that they end up as the defaults in the definition.
    """
    if isinstance(xml_or_obj, Mapping):
        return infer_from_object(xml_or_obj)

    obj = from_xml(
        xml_or_obj,
        definition=None,
        options=FromXmlOptions(inline_attributes=False, convert_types=False),
    )

    return infer_from_object(obj)
