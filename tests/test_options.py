# pylint: disable=missing-docstring

import unittest

import icontract

import xmlexact
from xmlexact import options


class Test_to_xml_options(unittest.TestCase):
    def test_defaults(self) -> None:
        got = options.to_xml_options(None)

        self.assertEqual(2, got.indentation)
        self.assertTrue(got.optimize_empty)
        self.assertTrue(got.convert_types)
        self.assertFalse(got.validation)

    def test_instance_is_passed_through(self) -> None:
        given = xmlexact.ToXmlOptions(indentation=4)

        self.assertIs(given, options.to_xml_options(given))

    def test_mapping(self) -> None:
        got = options.to_xml_options({"indentation": 4, "validation": True})

        self.assertEqual(4, got.indentation)
        self.assertTrue(got.validation)

    def test_camel_case_aliases(self) -> None:
        got = options.to_xml_options({"optimizeEmpty": False, "convertTypes": False})

        self.assertFalse(got.optimize_empty)
        self.assertFalse(got.convert_types)

    def test_options_of_the_other_direction_are_ignored(self) -> None:
        got = options.to_xml_options({"inlineAttributes": False, "indentation": 3})

        self.assertEqual(3, got.indentation)

    def test_unknown_option(self) -> None:
        with self.assertRaises(ValueError):
            options.to_xml_options({"pretty": True})

    def test_negative_indentation(self) -> None:
        with self.assertRaises(icontract.ViolationError):
            xmlexact.ToXmlOptions(indentation=-1)


class Test_from_xml_options(unittest.TestCase):
    def test_defaults(self) -> None:
        got = options.from_xml_options(None)

        self.assertTrue(got.inline_attributes)
        self.assertTrue(got.convert_types)

    def test_mapping(self) -> None:
        got = options.from_xml_options({"inlineAttributes": False})

        self.assertFalse(got.inline_attributes)
        self.assertTrue(got.convert_types)

    def test_from_to_xml_options(self) -> None:
        got = options.from_xml_options(xmlexact.ToXmlOptions(convert_types=False))

        self.assertFalse(got.convert_types)

    def test_unknown_option(self) -> None:
        with self.assertRaises(ValueError):
            options.from_xml_options({"strict": True})


if __name__ == "__main__":
    unittest.main()
