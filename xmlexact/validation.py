"""Check the values against the constraints declared in a definition."""
from typing import Any, Mapping, Optional, Tuple

from xmlexact import coercion
from xmlexact.common import ValidationError

_STRING_TYPES = frozenset(
    [
        "string",
        "normalizedString",
        "token",
        "anyURI",
        "language",
        "Name",
        "NCName",
        "QName",
        "ID",
        "IDREF",
        "NMTOKEN",
        coercion.XML_TYPE,
    ]
)


def describe_kind(value: Any) -> str:
    """Describe the kind of ``value`` in the vocabulary of the error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (bytes, bytearray)):
        return "buffer"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def check_array_expected(name: str, value: Any) -> None:
    """Report a value of ``name`` which is not a sequence though declared as one."""
    raise ValidationError(
        f"Expected {name} to be of type array found {describe_kind(value)}"
    )


def check_item_count(
    name: str, count: int, min_occurs: Optional[int], max_occurs: Optional[int]
) -> None:
    """Check the number of the repeated elements ``name`` against the cardinality."""
    if min_occurs is not None and count < min_occurs:
        raise ValidationError(
            f"The number of items in {name!r} should be larger than "
            f"or equal to {min_occurs}, but got {count}"
        )

    if max_occurs is not None and count > max_occurs:
        raise ValidationError(
            f"The number of items in {name!r} should be smaller than "
            f"or equal to {max_occurs}, but got {count}"
        )


def check_scalar(
    name: str,
    value: Any,
    type_tag: Optional[str],
    length: Optional[Tuple[int, int]],
) -> None:
    """Check the type and the length of a scalar ``value`` of the element ``name``."""
    if value is None:
        return

    expected_kind = None  # type: Optional[str]
    if type_tag == "boolean":
        if not isinstance(value, bool):
            expected_kind = "a boolean"
    elif type_tag in coercion.INTEGER_TYPES:
        if isinstance(value, bool) or not isinstance(value, int):
            expected_kind = "an integer"
    elif type_tag in coercion.FLOAT_TYPES:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            expected_kind = "a number"
    elif type_tag in coercion.BINARY_TYPES:
        if not isinstance(value, (bytes, bytearray, str)):
            expected_kind = "a buffer"
    elif type_tag in _STRING_TYPES:
        if not isinstance(value, str):
            expected_kind = "a string"

    if expected_kind is not None:
        raise ValidationError(
            f"Expected {name!r} to be {expected_kind} as it is of type "
            f"{type_tag!r}, but got a {describe_kind(value)}: {value!r}"
        )

    if length is not None and isinstance(value, (str, bytes, bytearray)):
        min_length, max_length = length
        if len(value) < min_length:
            raise ValidationError(
                f"The length of {name!r} should be larger than "
                f"or equal to {min_length}, but got {len(value)}"
            )
        if len(value) > max_length:
            raise ValidationError(
                f"The length of {name!r} should be smaller than "
                f"or equal to {max_length}, but got {len(value)}"
            )
