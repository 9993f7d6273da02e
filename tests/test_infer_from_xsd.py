# pylint: disable=missing-docstring

import json
import unittest

import xmlschema

import xmlexact
from xmlexact import infer
from xmlexact.infer import _from_xsd
from tests import common

NAMESPACES = {"xmlns:myns": "http://tempuri.org"}


def _schema(*lines: str, qualified: bool = True) -> str:
    """Wrap the ``lines`` in a schema targeting ``http://tempuri.org``."""
    form = ' elementFormDefault="qualified"' if qualified else ""
    return "\n".join(
        [
            f'<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"{form} '
            f'targetNamespace="http://tempuri.org">',
            *lines,
            "</xs:schema>",
        ]
    )


class Test_most_used_types(unittest.TestCase):
    def test_definition(self) -> None:
        xsd = _schema(
            '  <xs:element name="plain" type="xs:string">',
            "  </xs:element>",
            '  <xs:element name="simple">',
            "    <xs:simpleType>",
            '      <xs:restriction base="xs:string">',
            '        <xs:pattern value="[a-zA-Z0-9]{8}" />',
            "      </xs:restriction>",
            "    </xs:simpleType>",
            "  </xs:element>",
            '  <xs:element name="complexAll">',
            "    <xs:complexType>",
            "      <xs:all>",
            '        <xs:element name="tickerSymbola" type="xs:string">',
            "        </xs:element>",
            '        <xs:element name="tickerSymbolb" type="xs:string">',
            "        </xs:element>",
            "      </xs:all>",
            "    </xs:complexType>",
            "  </xs:element>",
            '  <xs:element name="complexSequence">',
            "    <xs:complexType>",
            "      <xs:sequence>",
            '        <xs:element name="tickerSymbol1" type="xs:string">',
            "        </xs:element>",
            '        <xs:element name="tickerSymbol2" type="xs:string">',
            "        </xs:element>",
            '        <xs:element name="plainArray" type="xs:string" '
            'minOccurs="0" maxOccurs="2">',
            "        </xs:element>",
            "      </xs:sequence>",
            "    </xs:complexType>",
            "  </xs:element>",
            '  <xs:element name="refrencedComplexSequence" type="myns:tickerType">',
            "  </xs:element>",
            '  <xs:element name="refrencedSimpleRestriction" '
            'type="myns:verySimpleType">',
            "  </xs:element>",
            '  <xs:complexType name="tickerType">',
            "    <xs:sequence>",
            '      <xs:element name="tickerSymbolx" type="xs:string">',
            "      </xs:element>",
            '      <xs:element name="tickerSymboly" type="xs:string">',
            "      </xs:element>",
            "    </xs:sequence>",
            "  </xs:complexType>",
            '  <xs:simpleType name="verySimpleType">',
            '    <xs:restriction base="xs:string">',
            '      <xs:maxLength value="3" />',
            "    </xs:restriction>",
            "  </xs:simpleType>",
        )

        attributes = {"xmlns:myns": "http://tempuri.org"}

        expected = {
            "plain$attributes": attributes,
            "plain$type": "string",
            "plain$namespace": "myns",
            "simple$attributes": attributes,
            "simple$type": "string",
            "simple$namespace": "myns",
            "complexAll$attributes": attributes,
            "complexAll$namespace": "myns",
            "complexAll": {
                "tickerSymbola$type": "string",
                "tickerSymbola$namespace": "myns",
                "tickerSymbolb$type": "string",
                "tickerSymbolb$namespace": "myns",
            },
            "complexSequence$attributes": attributes,
            "complexSequence$order": ["tickerSymbol1", "tickerSymbol2", "plainArray"],
            "complexSequence$namespace": "myns",
            "complexSequence": {
                "tickerSymbol1$type": "string",
                "tickerSymbol1$namespace": "myns",
                "tickerSymbol2$type": "string",
                "tickerSymbol2$namespace": "myns",
                "plainArray$type": ["string", 0, 2],
                "plainArray$namespace": "myns",
            },
            "refrencedComplexSequence$attributes": attributes,
            "refrencedComplexSequence$order": ["tickerSymbolx", "tickerSymboly"],
            "refrencedComplexSequence$namespace": "myns",
            "refrencedComplexSequence": {
                "tickerSymbolx$type": "string",
                "tickerSymbolx$namespace": "myns",
                "tickerSymboly$type": "string",
                "tickerSymboly$namespace": "myns",
            },
            "refrencedSimpleRestriction$attributes": attributes,
            "refrencedSimpleRestriction$length": [0, 3],
            "refrencedSimpleRestriction$type": "string",
            "refrencedSimpleRestriction$namespace": "myns",
        }

        got = xmlexact.generate_definition(xsd, "xsd", NAMESPACES)
        self.assertDictEqual(expected, got)


class Test_references(unittest.TestCase):
    def test_simple_type(self) -> None:
        xsd = _schema(
            '  <xs:element name="MyElement" type="myns:MyType">',
            "  </xs:element>",
            '  <xs:simpleType name="MyType">',
            '    <xs:restriction base="xs:string">',
            '      <xs:maxLength value="8" />',
            "    </xs:restriction>",
            "  </xs:simpleType>",
        )

        expected = {
            "MyElement$attributes": {"xmlns:myns": "http://tempuri.org"},
            "MyElement$namespace": "myns",
            "MyElement$type": "string",
            "MyElement$length": [0, 8],
        }

        self.assertDictEqual(
            expected, xmlexact.generate_definition(xsd, "xsd", NAMESPACES)
        )

    def test_complex_type_sequence(self) -> None:
        xsd = _schema(
            '  <xs:element name="MyElement" type="myns:TradePriceRequest">',
            "  </xs:element>",
            '  <xs:complexType name="TradePriceRequest">',
            "    <xs:sequence>",
            '      <xs:element name="tickerSymbol1" type="xs:string">',
            "      </xs:element>",
            '      <xs:element name="tickerSymbol2" type="xs:string">',
            "      </xs:element>",
            "    </xs:sequence>",
            "  </xs:complexType>",
        )

        expected = {
            "MyElement": {
                "tickerSymbol1$namespace": "myns",
                "tickerSymbol1$type": "string",
                "tickerSymbol2$namespace": "myns",
                "tickerSymbol2$type": "string",
            },
            "MyElement$attributes": {"xmlns:myns": "http://tempuri.org"},
            "MyElement$namespace": "myns",
            "MyElement$order": ["tickerSymbol1", "tickerSymbol2"],
        }

        self.assertDictEqual(
            expected, xmlexact.generate_definition(xsd, "xsd", NAMESPACES)
        )

    def test_element_reference(self) -> None:
        xsd = _schema(
            '  <xs:element name="wrapper">',
            "    <xs:complexType>",
            "      <xs:sequence>",
            '        <xs:element ref="myns:item" maxOccurs="3"/>',
            "      </xs:sequence>",
            "    </xs:complexType>",
            "  </xs:element>",
            '  <xs:element name="item" type="xs:int"/>',
        )

        got = xmlexact.generate_definition(xsd, "xsd", NAMESPACES)

        self.assertDictEqual(
            {"item$type": ["int", 1, 3], "item$namespace": "myns"}, got["wrapper"]
        )
        self.assertEqual("int", got["item$type"])

    def test_chain_within_the_limit(self) -> None:
        xsd = _schema(
            '  <xs:element name="e" type="myns:A"/>',
            '  <xs:simpleType name="A">',
            '    <xs:restriction base="myns:B"><xs:maxLength value="5"/>'
            "</xs:restriction>",
            "  </xs:simpleType>",
            '  <xs:simpleType name="B">',
            '    <xs:restriction base="xs:token"/>',
            "  </xs:simpleType>",
        )

        got = xmlexact.generate_definition(xsd, "xsd", NAMESPACES)

        self.assertEqual("token", got["e$type"])
        self.assertListEqual([0, 5], got["e$length"])

    def test_chain_too_deep(self) -> None:
        xsd = _schema(
            '  <xs:element name="e" type="myns:A"/>',
            '  <xs:simpleType name="A"><xs:restriction base="myns:B"/></xs:simpleType>',
            '  <xs:simpleType name="B"><xs:restriction base="myns:C"/></xs:simpleType>',
            '  <xs:simpleType name="C"><xs:restriction base="myns:D"/></xs:simpleType>',
            '  <xs:simpleType name="D">'
            '<xs:restriction base="xs:string"/></xs:simpleType>',
        )

        with self.assertRaises(xmlexact.DefinitionError) as context:
            xmlexact.generate_definition(xsd, "xsd", NAMESPACES)

        self.assertIn(
            f"Type reference nested more than {infer.MAX_TYPE_REFERENCE_DEPTH} levels",
            str(context.exception),
        )

    def test_missing_type(self) -> None:
        xsd = _schema('  <xs:element name="e" type="myns:Missing"/>')

        with self.assertRaises(xmlexact.DefinitionError) as context:
            xmlexact.generate_definition(xsd, "xsd", NAMESPACES)

        self.assertIn(
            "Could not find type 'Missing' in namespace 'http://tempuri.org'",
            str(context.exception),
        )


class Test_structures(unittest.TestCase):
    def test_unbounded(self) -> None:
        xsd = _schema(
            '  <xs:element name="list">',
            "    <xs:complexType>",
            "      <xs:sequence>",
            '        <xs:element name="item" type="xs:int" maxOccurs="unbounded"/>',
            "      </xs:sequence>",
            "    </xs:complexType>",
            "  </xs:element>",
        )

        got = xmlexact.generate_definition(xsd, "xsd", NAMESPACES)

        self.assertListEqual(["int", 1, None], got["list"]["item$type"])

    def test_choice(self) -> None:
        xsd = _schema(
            '  <xs:element name="shape">',
            "    <xs:complexType>",
            "      <xs:choice>",
            '        <xs:element name="circle" type="xs:double"/>',
            '        <xs:element name="square" type="xs:double"/>',
            "      </xs:choice>",
            "    </xs:complexType>",
            "  </xs:element>",
        )

        got = xmlexact.generate_definition(xsd, "xsd", NAMESPACES)

        self.assertDictEqual(
            {
                "circle$type": "double",
                "circle$namespace": "myns",
                "square$type": "double",
                "square$namespace": "myns",
            },
            got["shape"],
        )
        self.assertNotIn("shape$order", got)

    def test_sequence_of_any(self) -> None:
        xsd = _schema(
            '  <xs:element name="open">',
            "    <xs:complexType>",
            "      <xs:sequence>",
            '        <xs:any processContents="lax"/>',
            "      </xs:sequence>",
            "    </xs:complexType>",
            "  </xs:element>",
        )

        got = xmlexact.generate_definition(xsd, "xsd", NAMESPACES)

        self.assertEqual("any", got["open$type"])
        self.assertNotIn("open$order", got)

    def test_empty_complex_type(self) -> None:
        xsd = _schema(
            '  <xs:element name="marker">',
            "    <xs:complexType>",
            '      <xs:attribute name="id" type="xs:string"/>',
            "    </xs:complexType>",
            "  </xs:element>",
        )

        got = xmlexact.generate_definition(xsd, "xsd", NAMESPACES)

        self.assertEqual("empty", got["marker$type"])

    def test_element_without_type(self) -> None:
        xsd = _schema(
            '  <xs:element name="anything">',
            "    <xs:annotation><xs:documentation>Free</xs:documentation>"
            "</xs:annotation>",
            "  </xs:element>",
        )

        got = xmlexact.generate_definition(xsd, "xsd", NAMESPACES)

        self.assertEqual("any", got["anything$type"])

    def test_unknown_element_structure(self) -> None:
        xsd = _schema(
            '  <xs:element name="x">',
            '    <xs:unique name="u"/>',
            "  </xs:element>",
        )

        with self.assertRaises(xmlexact.DefinitionError) as context:
            xmlexact.generate_definition(xsd, "xsd", NAMESPACES)

        self.assertIn("Unknown element structure", str(context.exception))

    def test_unknown_complex_type_structure(self) -> None:
        xsd = _schema(
            '  <xs:element name="x">',
            "    <xs:complexType>",
            "      <xs:simpleContent>",
            '        <xs:extension base="xs:string"/>',
            "      </xs:simpleContent>",
            "    </xs:complexType>",
            "  </xs:element>",
        )

        with self.assertRaises(xmlexact.DefinitionError) as context:
            xmlexact.generate_definition(xsd, "xsd", NAMESPACES)

        self.assertIn("Unknown complexType structure", str(context.exception))

    def test_unqualified_local_elements(self) -> None:
        xsd = _schema(
            '  <xs:element name="root">',
            "    <xs:complexType>",
            "      <xs:all>",
            '        <xs:element name="child" type="xs:string"/>',
            "      </xs:all>",
            "    </xs:complexType>",
            "  </xs:element>",
            qualified=False,
        )

        got = xmlexact.generate_definition(xsd, "xsd", NAMESPACES)

        self.assertEqual("myns", got["root$namespace"])
        self.assertDictEqual({"child$type": "string"}, got["root"])


class Test_namespaces(unittest.TestCase):
    def test_missing_alias_for_the_target_namespace(self) -> None:
        xsd = _schema('  <xs:element name="e" type="xs:string"/>')

        with self.assertRaises(xmlexact.DefinitionError) as context:
            xmlexact.generate_definition(xsd, "xsd", {"xmlns:other": "http://other"})

        self.assertIn(
            "Unable to find alias for target namespace: 'http://tempuri.org'",
            str(context.exception),
        )

    def test_plain_aliases(self) -> None:
        xsd = _schema('  <xs:element name="e" type="xs:string"/>')

        got = xmlexact.generate_definition(xsd, "xsd", {"myns": "http://tempuri.org"})

        self.assertEqual("myns", got["e$namespace"])

    def test_from_parsed_schema(self) -> None:
        xsd = _schema('  <xs:element name="e" type="xs:int"/>')

        parsed = xmlexact.from_xml(
            xsd,
            _from_xsd.SCHEMA_DEFINITION,
            xmlexact.FromXmlOptions(convert_types=False),
        )

        got = xmlexact.generate_definition(parsed, "xsd", NAMESPACES)

        self.assertEqual("int", got["e$type"])

    def test_not_a_schema(self) -> None:
        with self.assertRaises(xmlexact.DefinitionError):
            xmlexact.generate_definition("<root/>", "xsd", NAMESPACES)


class Test_against_recorded(unittest.TestCase):
    PARENT_CASE_DIR = common.TEST_DATA_DIR / "infer_from_xsd"

    def test_cases(self) -> None:
        assert (
            Test_against_recorded.PARENT_CASE_DIR.exists()
            and Test_against_recorded.PARENT_CASE_DIR.is_dir()
        ), f"{Test_against_recorded.PARENT_CASE_DIR=}"

        for case_dir in sorted(Test_against_recorded.PARENT_CASE_DIR.iterdir()):
            assert case_dir.is_dir(), case_dir

            schema_pth = case_dir / "schema.xsd"
            namespaces_pth = case_dir / "namespaces.json"
            expected_pth = case_dir / "expected_definition.json"

            xsd = schema_pth.read_text(encoding="utf-8")
            namespaces = json.loads(namespaces_pth.read_text(encoding="utf-8"))

            definition = xmlexact.generate_definition(xsd, "xsd", namespaces)

            if common.RERECORD:
                expected_pth.write_text(
                    json.dumps(definition, indent=2) + "\n", encoding="utf-8"
                )
            else:
                self.assertDictEqual(
                    json.loads(expected_pth.read_text(encoding="utf-8")),
                    definition,
                    expected_pth,
                )

    def test_samples_conform_to_the_schema(self) -> None:
        for case_dir in sorted(Test_against_recorded.PARENT_CASE_DIR.iterdir()):
            schema_pth = case_dir / "schema.xsd"
            definition = json.loads(
                (case_dir / "expected_definition.json").read_text(encoding="utf-8")
            )

            schema = xmlschema.XMLSchema(str(schema_pth))

            root_names = [
                key[: -len("$namespace")]
                for key in definition
                if key.endswith("$namespace")
            ]
            assert len(root_names) > 0, case_dir

            for root_name in root_names:
                sample = xmlexact.generate_sample(root_name, definition)
                xml = xmlexact.to_xml(sample, root_name, definition)

                try:
                    schema.validate(xml)
                except xmlschema.XMLSchemaValidationError as err:
                    raise AssertionError(
                        f"The sample of {root_name!r} does not conform "
                        f"to {schema_pth}:\n{xml}"
                    ) from err


if __name__ == "__main__":
    unittest.main()
