"""Render an object tree as XML text guided by a definition."""
from typing import Any, Dict, List, Mapping, Optional

from icontract import require

from xmlexact import coercion, validation
from xmlexact.escaping import escape
from xmlexact.common import assert_never, reindent
from xmlexact.definition import (
    Metadata,
    Scope,
    read_metadata,
    sort_by_order,
    split_qualified_name,
)
from xmlexact.node import ElementNode, ScalarNode, SequenceNode, interpret
from xmlexact.options import OptionsLike, ToXmlOptions, to_xml_options


def _first(*values: Any) -> Any:
    """Return the first value which is not None."""
    for value in values:
        if value is not None:
            return value
    return None


class _Serializer:
    """Walk the object tree and the definition in parallel."""

    def __init__(self, options: ToXmlOptions) -> None:
        self.options = options

    def _format_text(self, value: Any, type_tag: Optional[str], level: int) -> str:
        """Format ``value`` as the text content of an element at ``level``."""
        if value is None:
            return ""

        if not self.options.convert_types:
            return escape(coercion.scalar_to_text(value))

        if type_tag == coercion.XML_TYPE:
            whitespace = " " * (self.options.indentation * (level + 1))
            return "\n" + reindent(coercion.scalar_to_text(value), whitespace) + "\n"

        return coercion.encode(value, type_tag)

    def _text_line(self, text: str, type_tag: Optional[str], level: int) -> str:
        """Put the formatted ``text`` on its own line among the children."""
        if text == "":
            return ""

        # NOTE: The raw XML blobs are already reindented and wrapped in new lines.
        if self.options.convert_types and type_tag == coercion.XML_TYPE:
            return text[1:]

        return " " * (level * self.options.indentation) + text + "\n"

    def _format_attribute(self, value: Any, type_tag: Optional[str]) -> str:
        if value is None:
            return ""

        if not self.options.convert_types or type_tag == coercion.XML_TYPE:
            return escape(coercion.scalar_to_text(value))

        return coercion.encode(value, type_tag)

    def _generate(
        self,
        tag: str,
        attributes: Mapping[str, str],
        content: str,
        level: int,
        explicit_text: bool,
    ) -> str:
        """Generate the markup of a single element around its ``content``."""
        whitespace = " " * (level * self.options.indentation)

        parts = [whitespace, "<", tag]  # type: List[str]

        # Attributes are unordered in XML, but we sort them so that the output is
        # deterministic and easy to compare.
        for key in sorted(attributes):
            parts.append(f' {key}="{attributes[key]}"')

        if content == "" and self.options.optimize_empty and not explicit_text:
            parts.append(" />\n")
        else:
            parts.append(">")
            parts.append(content)
            if content.endswith("\n"):
                parts.append(whitespace)
            parts.append(f"</{tag}>")
            if level > 0:
                parts.append("\n")

        return "".join(parts)

    def render(
        self,
        name: str,
        value: Any,
        inline: Metadata,
        scope: Scope,
        level: int,
        index: Optional[int] = None,
    ) -> str:
        """
        Render the element ``name`` with the given ``value``.

        :param name: key of the value in its parent, possibly qualified
        :param value: the value to be rendered
        :param inline: metadata stated next to the value in its parent
        :param scope: definition of the value and its siblings
        :param level: nesting level of the element
        :param index: position of the item if the value belongs to a sequence
        :return: XML markup
        """
        schema = scope.element(name)
        declared = schema.metadata
        node = interpret(value)

        own = (
            node.inline_for(name) if isinstance(node, ElementNode) else Metadata()
        )

        type_tag = _first(inline.type_tag, own.type_tag, declared.type_tag)
        is_array = inline.is_array or own.is_array or declared.is_array
        length = _first(inline.length, own.length, declared.length)

        if isinstance(node, SequenceNode):
            if self.options.validation:
                validation.check_item_count(
                    name=name,
                    count=len(node.items),
                    min_occurs=_first(inline.min_occurs, declared.min_occurs),
                    max_occurs=_first(inline.max_occurs, declared.max_occurs),
                )

            # Items of a sequence are siblings, so they stay at the same level.
            return "".join(
                self.render(
                    name=name, value=item, inline=inline, scope=scope, level=level, index=i
                )
                for i, item in enumerate(node.items)
            )

        if self.options.validation and is_array and index is None:
            validation.check_array_expected(name=name, value=value)

        # region Attributes

        defaults, attribute_types = schema.attribute_defaults()
        inline_attributes, inline_types = inline.attributes_at(index)
        attribute_types = {**attribute_types, **inline_types}

        attributes = dict()  # type: Dict[str, str]
        for key, attribute_value in defaults.items():
            attributes[key] = self._format_attribute(
                attribute_value, attribute_types.get(key, None)
            )

        for key, attribute_value in inline_attributes.items():
            attributes[key] = self._format_attribute(
                attribute_value, attribute_types.get(key, None)
            )

        if isinstance(node, ElementNode):
            for key, attribute_value in node.attributes.items():
                attributes[key] = self._format_attribute(
                    attribute_value, attribute_types.get(key, None)
                )

        # endregion

        # region Namespace

        prefix, local = split_qualified_name(name)

        namespace = _first(
            node.namespace_override if isinstance(node, ElementNode) else None,
            prefix,
            inline.namespace,
            declared.namespace,
        )

        tag = f"{namespace}:{local}" if namespace else local

        # endregion

        if isinstance(node, ScalarNode):
            if self.options.validation:
                validation.check_scalar(
                    name=name, value=node.value, type_tag=type_tag, length=length
                )

            return self._generate(
                tag=tag,
                attributes=attributes,
                content=self._format_text(node.value, type_tag, level),
                level=level,
                explicit_text=False,
            )

        elif isinstance(node, ElementNode):
            if self.options.validation:
                for text in (node.text, node.tail):
                    validation.check_scalar(
                        name=name, value=text, type_tag=type_tag, length=length
                    )

            order = _first(inline.order, own.order, declared.order)

            children = dict(node.children)
            markup = "".join(
                self.render(
                    name=key,
                    value=children[key],
                    inline=node.inline_for(key),
                    scope=schema.children,
                    level=level + 1,
                )
                for key in sort_by_order([key for key, _ in node.children], order)
            )

            text = self._format_text(node.text, type_tag, level)
            tail = self._format_text(node.tail, type_tag, level)

            if markup == "":
                content = text + tail
            else:
                content = (
                    "\n"
                    + self._text_line(text, type_tag, level + 1)
                    + markup
                    + self._text_line(tail, type_tag, level + 1)
                )

            return self._generate(
                tag=tag,
                attributes=attributes,
                content=content,
                level=level,
                explicit_text=node.has_explicit_text(),
            )

        else:
            assert_never(node)

        raise AssertionError("Unexpected execution path")


# fmt: off
@require(
    lambda obj, root_name:
    isinstance(obj, Mapping) and root_name in obj,
    "The root name must be a key of the object"
)
# fmt: on
def to_xml(
    obj: Mapping[str, Any],
    root_name: str,
    definition: Optional[Mapping[str, Any]] = None,
    options: OptionsLike = None,
) -> str:
    """
    Render ``obj[root_name]`` as XML text.

    The object ``obj`` wraps the root value and can hold its inline metadata
    (*e.g.*, ``root$order``) next to it.

    >>> to_xml({"root": {"a": 1, "b": True}}, "root")
    '<root>\\n  <a>1</a>\\n  <b>true</b>\\n</root>'

    >>> to_xml({"root": ""}, "root")
    '<root />\\n'
    """
    serializer = _Serializer(options=to_xml_options(options))

    return serializer.render(
        name=root_name,
        value=obj[root_name],
        inline=read_metadata(obj, root_name),
        scope=Scope(definition),
        level=0,
    )
