"""Map objects to XML and back guided by a definition."""

from xmlexact import common, infer, options, parser, sample, serialization
from xmlexact import deserialization

__version__ = "0.1.0"
__author__ = "xmlexact contributors"
__license__ = "License :: OSI Approved :: MIT License"
__status__ = "Beta"

XmlExactError = common.XmlExactError
ParseError = common.ParseError
DefinitionError = common.DefinitionError
ValidationError = common.ValidationError

ToXmlOptions = options.ToXmlOptions
FromXmlOptions = options.FromXmlOptions

to_xml = serialization.to_xml
from_xml = deserialization.from_xml
generate_definition = infer.generate_definition
generate_sample = sample.generate_sample

Parser = parser.Parser
