"""Infer definitions from sample documents and from XML Schemas."""

from xmlexact.infer import _from_xml, _from_xsd, _dispatch

guess_type = _from_xml.guess_type
infer_from_object = _from_xml.infer_from_object
infer_from_xml = _from_xml.infer_from_xml

XSD_NAMESPACE = _from_xsd.XSD_NAMESPACE
MAX_TYPE_REFERENCE_DEPTH = _from_xsd.MAX_TYPE_REFERENCE_DEPTH
infer_from_xsd = _from_xsd.infer_from_xsd

KINDS = _dispatch.KINDS
generate_definition = _dispatch.generate_definition
