# type: ignore
"""
Tests for :py:mod:`ldaptasks.coercion`.
"""

import unittest

from ldaptasks.coercion import coerce_attribute, coerce_attributes, to_guid
from ldaptasks.definitions import AttributeSpec
from ldaptasks.exceptions import ProtocolError
from ldaptasks.models import Attribute, ListValue, ScalarValue

#: objectGUID as Active Directory stores it, and the text it renders as.
AD_GUID_BYTES = bytes.fromhex("33221100554477668899aabbccddeeff")
AD_GUID_TEXT = "00112233-4455-6677-8899-aabbccddeeff"


class TestCoerceAttribute(unittest.TestCase):
    """Coercion of one attribute's raw values."""

    def test_single_string(self):
        """One value with no spec is a scalar."""
        self.assertEqual(coerce_attribute("cn", [b"alice"]), ScalarValue("alice"))

    def test_multi_valued_string(self):
        """Several values are a list, in server order."""
        value = coerce_attribute(
            "memberOf",
            [b"cn=b,dc=example,dc=com", b"cn=a,dc=example,dc=com"],
            [AttributeSpec("memberOf", "string")],
        )
        self.assertEqual(
            value, ListValue(("cn=b,dc=example,dc=com", "cn=a,dc=example,dc=com"))
        )

    def test_no_values(self):
        """An attribute with no values is an empty list, whatever its type."""
        self.assertEqual(coerce_attribute("cn", []), ListValue(()))
        self.assertEqual(
            coerce_attribute("objectGUID", [], [AttributeSpec("objectGUID", "guid")]),
            ListValue(()),
        )

    def test_byte(self):
        """``byte`` renders uppercase hex."""
        value = coerce_attribute("x", [b"\xde\xad"], [AttributeSpec("x", "byte")])
        self.assertEqual(value, ScalarValue("DEAD"))

    def test_byte_uses_first_value(self):
        """Only the first value of a ``byte`` attribute is kept."""
        with self.assertLogs("ldaptasks.coercion", level="DEBUG"):
            value = coerce_attribute(
                "x", [b"\x01", b"\x02"], [AttributeSpec("X", "byte")]
            )
        self.assertEqual(value, ScalarValue("01"))

    def test_guid(self):
        """``guid`` uses the Active Directory byte order."""
        value = coerce_attribute(
            "objectGUID", [AD_GUID_BYTES], [AttributeSpec("objectguid", "guid")]
        )
        self.assertEqual(value, ScalarValue(AD_GUID_TEXT))

    def test_guid_wrong_length(self):
        """A GUID value that is not 16 bytes is a protocol error."""
        with self.assertRaises(ProtocolError):
            coerce_attribute("objectGUID", [b"\x00" * 4], [AttributeSpec("objectGUID", "guid")])

    def test_invalid_utf8(self):
        """Undecodable bytes become replacement characters rather than errors."""
        value = coerce_attribute("cn", [b"caf\xe9"])
        self.assertEqual(value, ScalarValue("caf\ufffd"))

    def test_unrequested_attribute_is_string(self):
        """Attributes without a spec fall back to ``string``."""
        value = coerce_attribute("cn", [b"\xde\xad"], [AttributeSpec("objectGUID", "guid")])
        self.assertIsInstance(value, ScalarValue)


class TestCoerceAttributes(unittest.TestCase):
    """Coercion of a whole entry."""

    def test_keeps_server_order(self):
        """Attributes come back in the order the server sent them."""
        attributes = coerce_attributes(
            {
                "objectGUID": [AD_GUID_BYTES],
                "cn": [b"alice"],
                "mail": [b"a@example.com", b"alice@example.com"],
            },
            [AttributeSpec("objectGUID", "guid")],
        )
        self.assertEqual(
            attributes,
            (
                Attribute("objectGUID", ScalarValue(AD_GUID_TEXT)),
                Attribute("cn", ScalarValue("alice")),
                Attribute("mail", ListValue(("a@example.com", "alice@example.com"))),
            ),
        )
        self.assertEqual(
            [attribute.to_dict() for attribute in attributes][2],
            {"key": "mail", "value": ["a@example.com", "alice@example.com"]},
        )

    def test_to_guid(self):
        """:py:func:`to_guid` is lowercase hyphenated text."""
        self.assertEqual(to_guid(AD_GUID_BYTES), AD_GUID_TEXT)


if __name__ == "__main__":
    unittest.main()
