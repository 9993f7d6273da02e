"""Dispatch the inference of a definition on the kind of the sample."""
from typing import Any, Dict, Mapping, Optional, Union

from xmlexact.infer import _from_xml, _from_xsd

#: Kinds of samples a definition can be inferred from
KINDS = ("xml", "xsd")


def generate_definition(
    xml_or_obj: Union[str, bytes, Mapping[str, Any]],
    kind: str = "xml",
    namespaces: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Infer a definition from a sample.

    :param xml_or_obj: sample as XML text or as an already parsed object
    :param kind: ``xml`` for a sample document, ``xsd`` for an XML Schema
    :param namespaces:
        aliases of the namespaces for the definition, used only for ``xsd``
    :return: inferred definition
    :raise: :py:class:`ValueError` if the ``kind`` is unknown
    """
    if kind == "xml":
        return _from_xml.infer_from_xml(xml_or_obj)

    if kind == "xsd":
        return _from_xsd.infer_from_xsd(xml_or_obj, namespaces)

    raise ValueError(
        f"Unknown type {kind!r}, expected one of: {', '.join(KINDS)}"
    )
