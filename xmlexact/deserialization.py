"""Reconstruct an object tree from XML text guided by a definition."""
import logging
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Tuple, Union
from xml.parsers import expat

from xmlexact import coercion
from xmlexact.common import ParseError, dedent_block
from xmlexact.definition import (
    ElementSchema,
    Scope,
    namespace_declarations,
    split_qualified_name,
)
from xmlexact.node import NAMESPACE_KEY, TEXT_KEY
from xmlexact.options import FromXmlOptions, OptionsLike, from_xml_options

LOGGER = logging.getLogger(__name__)

#: Canonical identity of an attribute independent of the namespace aliases
_AttributeIdentity = Tuple[str, str]


def _attribute_identity(
    key: str, value: str, aliases: Mapping[str, str]
) -> _AttributeIdentity:
    """
    Identify the attribute ``key`` by the namespace URL instead of the alias.

    The namespace declarations are identified by the declared URL so that
    ``xmlns:soap`` and ``xmlns:soapenv`` are the same attribute if they declare
    the same namespace.
    """
    if key == "xmlns" or key.startswith("xmlns:"):
        return "xmlns", value

    prefix, local = split_qualified_name(key)
    if prefix is None:
        return "", key

    return aliases.get(prefix, prefix), local


class _Frame:
    """Represent an element which has been opened, but not yet closed."""

    def __init__(
        self,
        container: MutableMapping[str, Any],
        parent: Optional["_Frame"],
        key: str,
        index: Optional[int],
        schema: Optional[ElementSchema],
        scope: Scope,
        aliases: Mapping[str, str],
        definition_aliases: Mapping[str, str],
    ) -> None:
        """Initialize with the given values."""
        self.container = container
        self.parent = parent
        self.key = key
        self.index = index
        self.schema = schema
        self.scope = scope
        self.aliases = aliases
        self.definition_aliases = definition_aliases

        #: Stripped text runs of this element
        self.text = []  # type: List[str]

        #: Character data of the current text run, not yet stripped
        self.pending = []  # type: List[str]

        #: Distinct names of the children in the order of their first appearance
        self.order = []  # type: List[str]

        #: Byte offset where the start tag of a raw ``xml`` element begins
        self.capture_start = None  # type: Optional[int]

        #: Number of the nested elements opened inside a raw ``xml`` element
        self.capture_depth = 0

    def flush_text(self) -> None:
        """Close the current text run."""
        run = "".join(self.pending).strip()
        self.pending = []
        if run != "":
            self.text.append(run)

    def store(self, value: Any) -> None:
        """Replace the value of this element in its parent."""
        assert self.parent is not None
        if self.index is None:
            self.parent.container[self.key] = value
        else:
            self.parent.container[self.key][self.index] = value


def _end_of_start_tag(data: bytes, start: int) -> int:
    """Find the offset just after the start tag beginning at ``start``."""
    quote = None  # type: Optional[int]
    for i in range(start, len(data)):
        char = data[i]
        if quote is not None:
            if char == quote:
                quote = None
        elif char in (ord('"'), ord("'")):
            quote = char
        elif char == ord(">"):
            return i + 1

    return len(data)


class _Deserializer:
    """Handle the events of a single parse."""

    def __init__(
        self,
        data: bytes,
        encoding: Optional[str],
        definition: Optional[Mapping[str, Any]],
        options: FromXmlOptions,
    ) -> None:
        """Initialize with the given values."""
        self.data = data
        self.encoding = encoding
        self.options = options
        self.result = dict()  # type: Dict[str, Any]
        self.parser = None  # type: Optional[Any]

        self.stack = [
            _Frame(
                container=self.result,
                parent=None,
                key="",
                index=None,
                schema=None,
                scope=Scope(definition),
                aliases=dict(),
                definition_aliases=dict(),
            )
        ]  # type: List[_Frame]

        self._capturing = None  # type: Optional[_Frame]

    def _byte_index(self) -> int:
        assert self.parser is not None
        return int(self.parser.CurrentByteIndex)

    def _namespace_deviation(
        self,
        prefix: Optional[str],
        expected: Optional[str],
        aliases: Mapping[str, str],
        definition_aliases: Mapping[str, str],
    ) -> Optional[str]:
        """
        Determine the alias to be recorded if the document deviates from the definition.

        Two different aliases are equivalent if they are bound to the same
        namespace URL in the document and in the definition, respectively.
        """
        if prefix == expected:
            return None

        document_url = aliases.get(prefix if prefix is not None else "", None)
        expected_url = definition_aliases.get(
            expected if expected is not None else "", None
        )
        if document_url is not None and document_url == expected_url:
            return None

        return prefix if prefix is not None else ""

    def _filter_attributes(
        self,
        schema: ElementSchema,
        attributes: List[Tuple[str, str]],
        aliases: Mapping[str, str],
        definition_aliases: Mapping[str, str],
    ) -> Dict[str, Any]:
        """Drop the attributes restating the defaults and coerce the remaining ones."""
        defaults, attribute_types = schema.attribute_defaults()

        known = dict()  # type: Dict[_AttributeIdentity, str]
        for key, default in defaults.items():
            type_tag = attribute_types.get(key, None)
            text = (
                coercion.encode(default, type_tag)
                if type_tag in coercion.BINARY_TYPES
                else coercion.scalar_to_text(default)
            )
            known[_attribute_identity(key, text, definition_aliases)] = text

        result = dict()  # type: Dict[str, Any]
        for key, value in attributes:
            identity = _attribute_identity(key, value, aliases)

            # NOTE: Only the attributes equal to their default are dropped. An
            # attribute declared in the definition, but with a different value in
            # the document, is kept so that the serialization restores it.
            if known.get(identity, None) == value:
                LOGGER.debug(
                    "Dropping the attribute %r of %r as it restates the default",
                    key,
                    schema.name,
                )
                continue

            type_tag = attribute_types.get(key, None)
            if self.options.convert_types and type_tag is not None:
                result[key] = coercion.decode(value, type_tag)
            else:
                result[key] = value

        return result

    def _group_attributes(
        self,
        parent: MutableMapping[str, Any],
        key: str,
        index: Optional[int],
        attributes: Dict[str, Any],
    ) -> None:
        """Put the ``attributes`` next to the element as ``key$attributes``."""
        grouped_key = f"{key}$attributes"
        grouped = parent.get(grouped_key, None)

        if index is None:
            parent[grouped_key] = attributes
            return

        if grouped is None:
            grouped = []
        elif isinstance(grouped, Mapping):
            grouped = [grouped]

        while len(grouped) < index:
            grouped.append(dict())

        grouped.append(attributes)
        parent[grouped_key] = grouped

    def start_element(self, name: str, raw_attributes: List[str]) -> None:
        """Open a new element."""
        frame = self.stack[-1]

        if self._capturing is not None:
            self._capturing.capture_depth += 1
            return

        frame.flush_text()

        attributes = list(zip(raw_attributes[0::2], raw_attributes[1::2]))

        prefix, local = split_qualified_name(name)
        schema = frame.scope.element(name)

        # region Namespaces

        declarations = namespace_declarations(dict(attributes))
        aliases = (
            {**frame.aliases, **declarations}
            if len(declarations) > 0
            else frame.aliases
        )

        definition_declarations = schema.namespace_declarations()
        definition_aliases = (
            {**frame.definition_aliases, **definition_declarations}
            if len(definition_declarations) > 0
            else frame.definition_aliases
        )

        deviation = self._namespace_deviation(
            prefix=prefix,
            expected=schema.metadata.namespace,
            aliases=aliases,
            definition_aliases=definition_aliases,
        )

        # endregion

        node = dict()  # type: Dict[str, Any]
        parent = frame.container

        if deviation is not None:
            LOGGER.debug(
                "The element %r uses the namespace alias %r instead of %r",
                local,
                deviation,
                schema.metadata.namespace,
            )
            if self.options.inline_attributes:
                node[NAMESPACE_KEY] = deviation
            else:
                parent[f"{local}$namespace"] = deviation

        # region Placement

        index = None  # type: Optional[int]
        existing = parent.get(local, None)
        if local in parent:
            if isinstance(existing, list):
                index = len(existing)
                existing.append(node)
            else:
                # Second sighting of the same name, so this is an array.
                parent[local] = [existing, node]
                index = 1

                grouped = parent.get(f"{local}$attributes", None)
                if isinstance(grouped, Mapping):
                    parent[f"{local}$attributes"] = [grouped]

        elif schema.metadata.is_array:
            parent[local] = [node]
            index = 0
        else:
            parent[local] = node

        if local not in frame.order:
            frame.order.append(local)

        # endregion

        filtered = self._filter_attributes(
            schema=schema,
            attributes=attributes,
            aliases=aliases,
            definition_aliases=definition_aliases,
        )

        if len(filtered) > 0:
            if self.options.inline_attributes:
                for key, value in filtered.items():
                    node[f"${key}"] = value
            else:
                self._group_attributes(
                    parent=parent, key=local, index=index, attributes=filtered
                )

        child = _Frame(
            container=node,
            parent=frame,
            key=local,
            index=index,
            schema=schema,
            scope=schema.children,
            aliases=aliases,
            definition_aliases=definition_aliases,
        )
        self.stack.append(child)

        if self.options.convert_types and schema.metadata.type_tag == coercion.XML_TYPE:
            child.capture_start = _end_of_start_tag(self.data, self._byte_index())
            if self.data[child.capture_start - 2 : child.capture_start] == b"/>":
                child.capture_start = None
            self._capturing = child

    def character_data(self, data: str) -> None:
        """Collect the text of the current element."""
        if self._capturing is not None:
            return

        self.stack[-1].pending.append(data)

    def end_element(self, name: str) -> None:  # pylint: disable=unused-argument
        """Close the current element."""
        frame = self.stack[-1]

        if self._capturing is not None:
            if frame.capture_depth > 0:
                frame.capture_depth -= 1
                return

            self._capturing = None
            self.stack.pop()

            inner = ""
            if frame.capture_start is not None:
                inner = self.data[frame.capture_start : self._byte_index()].decode(
                    self.encoding or "utf-8"
                )

            value = dedent_block(inner)
            if len(frame.container) == 0:
                frame.store(value)
            elif value != "":
                frame.container[TEXT_KEY] = value
            return

        frame.flush_text()
        self.stack.pop()

        assert frame.parent is not None
        assert frame.schema is not None

        metadata = frame.schema.metadata

        # The order is only informative if there are at least two names to order.
        if len(frame.order) > 1 and frame.order != metadata.order:
            frame.parent.container[f"{frame.key}$order"] = frame.order

        text = "".join(frame.text)
        if len(frame.container) == 0:
            if self.options.convert_types:
                frame.store(coercion.decode(text, metadata.type_tag))
            else:
                frame.store(text)
        elif text != "":
            frame.container[TEXT_KEY] = (
                coercion.decode(text, metadata.type_tag)
                if self.options.convert_types
                else text
            )

    def entity_declaration(self, *args: Any) -> None:
        """Refuse the entity declarations of a document type definition."""
        raise ParseError(f"Entity declarations are not supported: {args[0]!r}")

    def parse(self) -> Dict[str, Any]:
        """Run the parser over the whole data and return the reconstructed object."""
        self.parser = expat.ParserCreate(self.encoding)
        self.parser.ordered_attributes = True
        self.parser.buffer_text = True
        self.parser.StartElementHandler = self.start_element
        self.parser.EndElementHandler = self.end_element
        self.parser.CharacterDataHandler = self.character_data
        self.parser.EntityDeclHandler = self.entity_declaration

        try:
            self.parser.Parse(self.data, True)
        except expat.ExpatError as exception:
            raise ParseError(
                f"There are errors in your XML: {exception}"
            ) from exception

        return self.result


def from_xml(
    text: Union[str, bytes],
    definition: Optional[Mapping[str, Any]] = None,
    options: OptionsLike = None,
) -> Dict[str, Any]:
    """
    Parse the XML ``text`` into an object.

    The result wraps the root element under its name. The order of the children
    is recorded as ``name$order`` next to each element with more than one
    distinct child name, unless the ``definition`` already declares it.

    >>> from_xml("<root><a>1</a><b>2</b></root>")
    {'root': {'a': '1', 'b': '2'}, 'root$order': ['a', 'b']}
    """
    # NOTE: The text has already been decoded, so the encoding stated in the XML
    # declaration must not be applied once again.
    encoding = "utf-8" if isinstance(text, str) else None
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)

    deserializer = _Deserializer(
        data=data,
        encoding=encoding,
        definition=definition if isinstance(definition, Mapping) else None,
        options=from_xml_options(options),
    )

    return deserializer.parse()
