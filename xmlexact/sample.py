"""Generate a representative object from a definition."""
import copy
from typing import Any, Dict, List, Mapping, Optional

from xmlexact.common import DefinitionError
from xmlexact.definition import read_metadata

# NOTE: The padded types are filled with spaces up to the declared maximum length.
_PADDED_TYPES = frozenset(
    ["string", "normalizedString", "token", "base64Binary", "hexBinary"]
)

_CONSTANTS = {
    "boolean": True,
    "anyURI": "http://sample.com",
    "language": "en",
    "byte": 0,
    "int": 0,
    "integer": 0,
    "long": 0,
    "short": 0,
    "unsignedByte": 0,
    "unsignedInt": 0,
    "unsignedLong": 0,
    "unsignedShort": 0,
    "positiveInteger": 1,
    "nonNegativeInteger": 1,
    "negativeInteger": -1,
    "nonPositiveInteger": -1,
    "decimal": 0.0,
    "double": 0.0,
    "float": 0.0,
    "date": "2000-01-01",
    "dateTime": "2000-01-01T00:00:00",
    "time": "00:00:00",
    "empty": "",
}  # type: Mapping[str, Any]


def sample_scalar(type_tag: str, length: int) -> Any:
    """
    Produce a placeholder value of the type ``type_tag``.

    >>> sample_scalar("string", 3)
    '   '

    >>> sample_scalar("boolean", 1)
    True
    """
    if type_tag in _PADDED_TYPES:
        return " " * length

    if type_tag == "any":
        return dict()

    if type_tag in _CONSTANTS:
        return _CONSTANTS[type_tag]

    raise DefinitionError(f"Unknown XSD type '{type_tag}'")


def _element_names(definition: Mapping[str, Any]) -> List[str]:
    """List the elements declared in ``definition`` in the order of appearance."""
    names = []  # type: List[str]
    for key in definition:
        if "$" not in key:
            name = key
        elif key.endswith("$type") and not key.startswith("$"):
            name = key[: -len("$type")]
        else:
            continue

        if name not in names:
            names.append(name)

    return names


def _sample_children(definition: Optional[Any]) -> Dict[str, Any]:
    result = dict()  # type: Dict[str, Any]
    if not isinstance(definition, Mapping):
        return result

    for name in _element_names(definition):
        result[name] = _sample_element(definition, name)

    return result


def _sample_element(scope: Mapping[str, Any], name: str) -> Any:
    """Produce the sample value of the element ``name`` declared in ``scope``."""
    metadata = read_metadata(scope, name)
    length = 1 if metadata.length is None else metadata.length[1]

    if metadata.type_tag is None:
        item = _sample_children(scope.get(name, None))
    else:
        item = sample_scalar(metadata.type_tag, length)

    if not metadata.is_array:
        return item

    if metadata.max_occurs is not None:
        count = metadata.max_occurs
    else:
        # Unbounded or undeclared cardinality
        count = max(metadata.min_occurs or 1, 1)

    return [copy.deepcopy(item) for _ in range(count)]


def generate_sample(root_name: str, definition: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Generate a sample object for the root element ``root_name``.

    >>> generate_sample("root", {"root": {"a$type": "int", "b$type": ["string", 1, 2]}})
    {'root': {'a': 0, 'b': [' ', ' ']}}
    """
    return {root_name: _sample_element(definition, root_name)}
