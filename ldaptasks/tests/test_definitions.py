# type: ignore
"""
Tests for :py:mod:`ldaptasks.definitions`.
"""

import unittest

from ldaptasks.definitions import (
    DEFAULT_PAGE_SIZE,
    MATCH_ALL_FILTER,
    AddToGroupInput,
    AttributeReturnType,
    AttributeSpec,
    DeleteUserInput,
    Dereference,
    Scope,
    SearchRequestSpec,
    UserExistsAction,
)
from ldaptasks.exceptions import ConfigurationError, ProtocolError


class TestSearchRequestSpec(unittest.TestCase):
    """Defaults and normalization of :py:class:`SearchRequestSpec`."""

    def test_defaults(self):
        """A bare request searches the whole subtree for everything."""
        spec = SearchRequestSpec()
        self.assertEqual(spec.scope, Scope.SUBTREE)
        self.assertEqual(spec.dereference, Dereference.NEVER)
        self.assertEqual(spec.page_size, DEFAULT_PAGE_SIZE)
        self.assertEqual(spec.search_filter, MATCH_ALL_FILTER)
        self.assertIsNone(spec.attribute_names)

    def test_page_size_not_positive(self):
        """Zero and negative page sizes become 500."""
        for page_size in (0, -1, -500):
            with self.subTest(page_size=page_size):
                self.assertEqual(SearchRequestSpec(page_size=page_size).page_size, 500)

    def test_page_size_kept(self):
        """A positive page size is used as given."""
        self.assertEqual(SearchRequestSpec(page_size=2).page_size, 2)

    def test_batch_size_not_positive(self):
        """A batch size below one becomes one."""
        self.assertEqual(SearchRequestSpec(batch_size=0).batch_size, 1)

    def test_negative_max_results(self):
        """A negative result limit is a configuration error."""
        with self.assertRaises(ConfigurationError):
            SearchRequestSpec(max_results=-1)

    def test_enum_values_from_strings(self):
        """Scope and dereference may be given as their string values."""
        spec = SearchRequestSpec(scope="one_level", dereference="always")
        self.assertEqual(spec.scope, Scope.ONE_LEVEL)
        self.assertEqual(spec.dereference, Dereference.ALWAYS)

    def test_invalid_scope(self):
        """An unknown scope is rejected."""
        with self.assertRaises(ProtocolError) as ctx:
            SearchRequestSpec(scope="deep")
        self.assertIn("Invalid scope", str(ctx.exception))

    def test_invalid_dereference(self):
        """An unknown dereference policy is rejected."""
        with self.assertRaises(ProtocolError):
            SearchRequestSpec(dereference="sometimes")

    def test_attributes_from_dicts(self):
        """Attribute specs may be given as JSON style dictionaries."""
        spec = SearchRequestSpec(
            attributes=[
                {"key": "cn"},
                {"key": "objectGUID", "returnType": "GUID"},
                {"key": "objectSid", "return_type": "byte"},
            ]
        )
        self.assertEqual(
            spec.attributes,
            (
                AttributeSpec("cn"),
                AttributeSpec("objectGUID", AttributeReturnType.GUID),
                AttributeSpec("objectSid", AttributeReturnType.BYTE),
            ),
        )
        self.assertEqual(spec.attribute_names, ["cn", "objectGUID", "objectSid"])

    def test_custom_filter(self):
        """A non-empty filter is sent as given."""
        spec = SearchRequestSpec(filter="(sAMAccountName=jdoe)")
        self.assertEqual(spec.search_filter, "(sAMAccountName=jdoe)")


class TestAttributeSpec(unittest.TestCase):
    """Matching and parsing of :py:class:`AttributeSpec`."""

    def test_matches_case_insensitively(self):
        """Attribute names are matched without regard to case."""
        spec = AttributeSpec("objectGUID", "guid")
        self.assertTrue(spec.matches("objectguid"))
        self.assertTrue(spec.matches("OBJECTGUID"))
        self.assertFalse(spec.matches("objectSid"))

    def test_invalid_return_type(self):
        """An unknown return type is rejected."""
        with self.assertRaises(ProtocolError):
            AttributeSpec("cn", "json")


class TestTaskInputs(unittest.TestCase):
    """Validation of the auxiliary task inputs."""

    def test_add_to_group_missing_user(self):
        """The user DN is required."""
        with self.assertRaises(ConfigurationError) as ctx:
            AddToGroupInput(user_dn="", group_dn="cn=admins,dc=example,dc=com").validate()
        self.assertEqual(str(ctx.exception), "User distinguished name is missing.")

    def test_add_to_group_missing_group(self):
        """The group DN is required."""
        with self.assertRaises(ConfigurationError) as ctx:
            AddToGroupInput(user_dn="cn=u,dc=example,dc=com", group_dn=" ").validate()
        self.assertEqual(str(ctx.exception), "Group distinguished name is missing.")

    def test_add_to_group_action_from_string(self):
        """The user exists action may be given as its string value."""
        task_input = AddToGroupInput(
            user_dn="cn=u,dc=example,dc=com",
            group_dn="cn=g,dc=example,dc=com",
            user_exists_action="skip",
        )
        self.assertEqual(task_input.user_exists_action, UserExistsAction.SKIP)

    def test_delete_user_missing_dn(self):
        """The DN to delete is required."""
        with self.assertRaises(ConfigurationError) as ctx:
            DeleteUserInput(distinguished_name="").validate()
        self.assertEqual(str(ctx.exception), "Distinguished name is missing.")


if __name__ == "__main__":
    unittest.main()
