"""Bind a definition and the options for repeated conversions."""
from typing import Any, Dict, Mapping, Optional, Union

from xmlexact import deserialization, sample, serialization
from xmlexact.infer import generate_definition
from xmlexact.options import OptionsLike


class Parser:
    """
    Convert between objects and XML with the same definition and options.

    >>> parser = Parser({"root": {"flag$type": "boolean"}})
    >>> parser.from_xml("<root><flag>true</flag></root>")
    {'root': {'flag': True}}
    """

    def __init__(
        self,
        definition: Optional[Mapping[str, Any]] = None,
        options: OptionsLike = None,
    ) -> None:
        """Initialize with the given values."""
        self.definition = definition if definition is not None else dict()
        self.options = options

    def to_xml(self, obj: Mapping[str, Any], root_name: str) -> str:
        """Render ``obj[root_name]`` as XML text."""
        return serialization.to_xml(
            obj, root_name, definition=self.definition, options=self.options
        )

    def from_xml(self, text: Union[str, bytes]) -> Dict[str, Any]:
        """Parse the XML ``text`` into an object."""
        return deserialization.from_xml(
            text, definition=self.definition, options=self.options
        )

    def generate_sample(self, root_name: str) -> Dict[str, Any]:
        """Generate a sample object for the root element ``root_name``."""
        return sample.generate_sample(root_name, self.definition)

    # NOTE: The inference does not depend on the bound definition. We expose it
    # here so that the parser can be used as the single entry point.
    @staticmethod
    def generate_definition(
        xml_or_obj: Union[str, bytes, Mapping[str, Any]],
        kind: str = "xml",
        namespaces: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Any]:
        """Infer a definition from a sample."""
        return generate_definition(xml_or_obj, kind, namespaces)
