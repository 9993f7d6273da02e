"""
Read the sigil-encoded definitions into explicit schema structures.

A definition is a plain mapping from element names to nested definitions. The
metadata of an element ``E`` is stored next to it under the reserved keys
``E$type``, ``E$attributes``, ``E$namespace``, ``E$order`` and ``E$length``.
The same keys may also appear next to the data in an object, where they override
the definition (*inline* metadata).

The sigil keys are read only in this module. The serializer and the deserializer
work on :py:class:`Metadata`, :py:class:`ElementSchema` and :py:class:`Scope`.
"""
from typing import (
    Any,
    Dict,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from icontract import require

from xmlexact.common import DefinitionError

#: Reserved suffixes of the metadata keys
SIGILS = ("type", "attributes", "namespace", "order", "length")

#: Attributes of an element as defaults or values, keyed by the attribute name
AttributeMapping = Mapping[str, Any]


def split_qualified_name(name: str) -> Tuple[Optional[str], str]:
    """
    Split ``name`` into the namespace alias and the local name.

    >>> split_qualified_name("soap:Envelope")
    ('soap', 'Envelope')

    >>> split_qualified_name("Envelope")
    (None, 'Envelope')
    """
    prefix, separator, local = name.partition(":")
    if separator == "":
        return None, name

    return prefix, local


def is_metadata_key(key: str) -> bool:
    """Check whether ``key`` is a sigil key such as ``child$order``."""
    return key.find("$") > 0 and key != "namespace$"


def namespace_declarations(attributes: Mapping[str, Any]) -> Dict[str, str]:
    """
    Collect the ``xmlns`` declarations among ``attributes`` as alias → URL.

    The default namespace is reported under the empty alias.
    """
    result = dict()  # type: Dict[str, str]
    for key, value in attributes.items():
        if key == "xmlns":
            result[""] = str(value)
        elif key.startswith("xmlns:"):
            result[key[len("xmlns:") :]] = str(value)

    return result


class Metadata:
    """Represent the metadata of one element as declared at one place."""

    # fmt: off
    @require(
        lambda length:
        length is None
        or (len(length) == 2 and 0 <= length[0] <= length[1])
    )
    # fmt: on
    def __init__(
        self,
        type_tag: Optional[str] = None,
        is_array: bool = False,
        min_occurs: Optional[int] = None,
        max_occurs: Optional[int] = None,
        attributes: Union[None, AttributeMapping, Sequence[AttributeMapping]] = None,
        namespace: Optional[str] = None,
        order: Optional[Sequence[str]] = None,
        length: Optional[Tuple[int, int]] = None,
    ) -> None:
        """Initialize with the given values."""
        self.type_tag = type_tag
        self.is_array = is_array
        self.min_occurs = min_occurs
        self.max_occurs = max_occurs
        self.attributes = attributes
        self.namespace = namespace
        self.order = order
        self.length = length

    def attributes_at(
        self, index: Optional[int]
    ) -> Tuple[Dict[str, Any], Dict[str, str]]:
        """
        Split the attributes for the item at ``index`` into values and types.

        Grouped attributes of repeated elements are given as a list aligned with
        the items. ``index`` is None for an element which is not repeated.
        """
        raw = self.attributes  # type: Any
        if isinstance(raw, (list, tuple)):
            position = 0 if index is None else index
            raw = raw[position] if position < len(raw) else None

        values = dict()  # type: Dict[str, Any]
        types = dict()  # type: Dict[str, str]

        if isinstance(raw, Mapping):
            for key, value in raw.items():
                if key.endswith("$type"):
                    types[key[: -len("$type")]] = value
                elif "$" in key:
                    continue
                else:
                    values[key] = value

        return values, types

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"type_tag={self.type_tag!r}, "
            f"is_array={self.is_array!r}, "
            f"namespace={self.namespace!r}, "
            f"order={self.order!r})"
        )


def _read_type(
    raw: Any,
) -> Tuple[Optional[str], bool, Optional[int], Optional[int]]:
    """Read a type tag or the array triple ``[tag, minOccurs, maxOccurs]``."""
    if raw is None:
        return None, False, None, None

    if isinstance(raw, str):
        return raw, False, None, None

    if isinstance(raw, (list, tuple)):
        tag = raw[0] if len(raw) > 0 else None

        # NOTE: Definitions inferred from nested arrays carry the item type
        # wrapped once more.
        while isinstance(tag, (list, tuple)):
            tag = tag[0] if len(tag) > 0 else None

        min_occurs = raw[1] if len(raw) > 1 else None
        max_occurs = raw[2] if len(raw) > 2 else None
        return tag, True, min_occurs, max_occurs

    raise DefinitionError(
        f"Expected a type tag or a list [type, minOccurs, maxOccurs], "
        f"but got: {raw!r}"
    )


def _read_length(raw: Any) -> Optional[Tuple[int, int]]:
    if raw is None:
        return None

    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise DefinitionError(f"Expected a length as [min, max], but got: {raw!r}")

    min_length, max_length = raw
    if (
        not isinstance(min_length, int)
        or not isinstance(max_length, int)
        or isinstance(min_length, bool)
        or isinstance(max_length, bool)
        or not 0 <= min_length <= max_length
    ):
        raise DefinitionError(
            f"Expected a length as [min, max] of integers "
            f"with 0 <= min <= max, but got: {raw!r}"
        )

    return min_length, max_length


def read_metadata(mapping: Mapping[str, Any], name: str) -> Metadata:
    """
    Read the metadata of the element ``name`` from the sigil keys in ``mapping``.

    If ``name`` is qualified with a namespace alias, the qualified keys are
    preferred over the keys of the local name.
    """
    prefix, local = split_qualified_name(name)
    candidates = [name] if prefix is None else [name, local]

    def get(sigil: str) -> Any:
        for candidate in candidates:
            value = mapping.get(f"{candidate}${sigil}", None)
            if value is not None:
                return value
        return None

    type_tag, is_array, min_occurs, max_occurs = _read_type(get("type"))

    namespace = get("namespace")
    order = get("order")

    return Metadata(
        type_tag=type_tag,
        is_array=is_array,
        min_occurs=min_occurs,
        max_occurs=max_occurs,
        attributes=get("attributes"),
        namespace=None if namespace is None else str(namespace),
        order=None if order is None else [str(item) for item in order],
        length=_read_length(get("length")),
    )


class Scope:
    """Represent one level of a definition, *i.e.*, the definitions of siblings."""

    def __init__(self, mapping: Optional[Mapping[str, Any]]) -> None:
        """Initialize with the given values."""
        self.mapping = (
            mapping if isinstance(mapping, Mapping) else dict()
        )  # type: Mapping[str, Any]
        self._cache = dict()  # type: MutableMapping[str, ElementSchema]

    def element(self, name: str) -> "ElementSchema":
        """Resolve the schema of the element ``name`` at this level."""
        schema = self._cache.get(name, None)
        if schema is not None:
            return schema

        prefix, local = split_qualified_name(name)

        children = self.mapping.get(name, None)
        if children is None and prefix is not None:
            children = self.mapping.get(local, None)

        schema = ElementSchema(
            name=name,
            metadata=read_metadata(self.mapping, name),
            children=Scope(children if isinstance(children, Mapping) else None),
        )
        self._cache[name] = schema
        return schema


class ElementSchema:
    """Represent what a definition states about an element."""

    def __init__(self, name: str, metadata: Metadata, children: Scope) -> None:
        """Initialize with the given values."""
        self.name = name
        self.metadata = metadata
        self.children = children

    def attribute_defaults(self) -> Tuple[Dict[str, Any], Dict[str, str]]:
        """Split the declared attributes into the default values and the types."""
        return self.metadata.attributes_at(None)

    def namespace_declarations(self) -> Dict[str, str]:
        """Collect the namespace aliases declared among the default attributes."""
        values, _ = self.attribute_defaults()
        return namespace_declarations(values)


def sort_by_order(keys: Sequence[str], order: Optional[Sequence[str]]) -> List[str]:
    """
    Sort ``keys`` by their position in ``order``.

    The keys missing in ``order`` come last in their original relative order.

    >>> sort_by_order(["c", "x", "a", "y", "b"], ["a", "b", "c"])
    ['a', 'b', 'c', 'x', 'y']
    """
    if order is None or len(order) == 0:
        return list(keys)

    position = {key: i for i, key in reversed(list(enumerate(order)))}

    return sorted(
        keys,
        key=lambda key: (0, position[key]) if key in position else (1, 0),
    )
