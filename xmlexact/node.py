"""Classify plain values of an object tree into scalar, element and sequence nodes."""
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from xmlexact.definition import Metadata, is_metadata_key, read_metadata

#: Key of the text content preceding the children of an element
TEXT_KEY = "$"

#: Key of the text content following the children of an element
TAIL_KEY = "$$"

#: Key of the inline override of the namespace alias of an element
NAMESPACE_KEY = "namespace$"


class ScalarNode:
    """Represent a value rendered as text content (or as an empty element)."""

    def __init__(self, value: Any) -> None:
        """Initialize with the given values."""
        self.value = value


class ElementNode:
    """
    Represent a mapping rendered as an element with children.

    The members ``$`` and ``$$`` are the text before and after the children,
    ``namespace$`` overrides the namespace alias, the other members starting with
    ``$`` are the attributes, and the members like ``child$order`` are the inline
    metadata of the children.
    """

    def __init__(
        self,
        mapping: Mapping[str, Any],
        text: Optional[Any],
        tail: Optional[Any],
        namespace_override: Optional[str],
        attributes: Dict[str, Any],
        children: List[Tuple[str, Any]],
    ) -> None:
        """Initialize with the given values."""
        self.mapping = mapping
        self.text = text
        self.tail = tail
        self.namespace_override = namespace_override
        self.attributes = attributes
        self.children = children

    def has_explicit_text(self) -> bool:
        """Check whether the element explicitly states its text content."""
        return self.text is not None or self.tail is not None

    def inline_for(self, key: str) -> Metadata:
        """Read the metadata of the child ``key`` stated next to it."""
        return read_metadata(self.mapping, key)


class SequenceNode:
    """Represent a list rendered as repeated sibling elements."""

    def __init__(self, items: List[Any]) -> None:
        """Initialize with the given values."""
        self.items = items


NodeUnion = Union[ScalarNode, ElementNode, SequenceNode]


def interpret(value: Any) -> NodeUnion:
    """Classify ``value`` as a node."""
    if isinstance(value, (list, tuple)):
        return SequenceNode(items=list(value))

    if not isinstance(value, Mapping):
        return ScalarNode(value=value)

    text = None  # type: Optional[Any]
    tail = None  # type: Optional[Any]
    namespace_override = None  # type: Optional[str]
    attributes = dict()  # type: Dict[str, Any]
    children = []  # type: List[Tuple[str, Any]]

    for key, item in value.items():
        if key == TEXT_KEY:
            text = item
        elif key == TAIL_KEY:
            tail = item
        elif key == NAMESPACE_KEY:
            namespace_override = None if item is None else str(item)
        elif key.startswith("$"):
            attributes[key[1:]] = item
        elif is_metadata_key(key):
            continue
        else:
            children.append((key, item))

    return ElementNode(
        mapping=value,
        text=text,
        tail=tail,
        namespace_override=namespace_override,
        attributes=attributes,
        children=children,
    )
