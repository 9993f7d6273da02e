"""Configure the serialization and the deserialization."""
from typing import Any, Mapping, Union

from icontract import require


class ToXmlOptions:
    """Represent the options of turning an object into XML."""

    @require(lambda indentation: indentation >= 0)
    def __init__(
        self,
        indentation: int = 2,
        optimize_empty: bool = True,
        convert_types: bool = True,
        validation: bool = False,
    ) -> None:
        """
        Initialize with the given values.

        :param indentation: number of spaces per nesting level
        :param optimize_empty: render the empty elements as self-closing tags
        :param convert_types: encode the values according to their declared types
        :param validation: check the values against the declared constraints
        """
        self.indentation = indentation
        self.optimize_empty = optimize_empty
        self.convert_types = convert_types
        self.validation = validation


class FromXmlOptions:
    """Represent the options of turning XML into an object."""

    def __init__(
        self,
        inline_attributes: bool = True,
        convert_types: bool = True,
    ) -> None:
        """
        Initialize with the given values.

        :param inline_attributes:
            put the attributes as ``$name`` members on the element instead of
            grouping them next to it as ``element$attributes``
        :param convert_types: parse the text according to the declared types
        """
        self.inline_attributes = inline_attributes
        self.convert_types = convert_types


# NOTE: The camel-case names are accepted so that the option mappings written
# for the JavaScript tools can be passed as-is.
_ALIASES = {
    "optimizeEmpty": "optimize_empty",
    "convertTypes": "convert_types",
    "inlineAttributes": "inline_attributes",
}

_TO_XML_NAMES = frozenset(
    ["indentation", "optimize_empty", "convert_types", "validation"]
)
_FROM_XML_NAMES = frozenset(["inline_attributes", "convert_types"])


def _normalize(options: Mapping[str, Any]) -> Mapping[str, Any]:
    result = dict()
    for key, value in options.items():
        name = _ALIASES.get(key, key)
        if name not in _TO_XML_NAMES and name not in _FROM_XML_NAMES:
            raise ValueError(f"Unexpected option: {key!r}")
        result[name] = value

    return result


OptionsLike = Union[None, ToXmlOptions, FromXmlOptions, Mapping[str, Any]]


def to_xml_options(options: OptionsLike) -> ToXmlOptions:
    """Resolve the options of the serialization, falling back to the defaults."""
    if options is None:
        return ToXmlOptions()

    if isinstance(options, ToXmlOptions):
        return options

    if isinstance(options, FromXmlOptions):
        return ToXmlOptions(convert_types=options.convert_types)

    normalized = _normalize(options)
    return ToXmlOptions(
        **{key: value for key, value in normalized.items() if key in _TO_XML_NAMES}
    )


def from_xml_options(options: OptionsLike) -> FromXmlOptions:
    """Resolve the options of the deserialization, falling back to the defaults."""
    if options is None:
        return FromXmlOptions()

    if isinstance(options, FromXmlOptions):
        return options

    if isinstance(options, ToXmlOptions):
        return FromXmlOptions(convert_types=options.convert_types)

    normalized = _normalize(options)
    return FromXmlOptions(
        **{key: value for key, value in normalized.items() if key in _FROM_XML_NAMES}
    )
