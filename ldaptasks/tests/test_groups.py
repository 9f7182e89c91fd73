# type: ignore
"""
Tests for :py:mod:`ldaptasks.groups`.
"""

import unittest

from ldaptasks.config import ConnectionConfig
from ldaptasks.definitions import AddToGroupInput, UserExistsAction
from ldaptasks.exceptions import (
    AuthenticationError,
    ConfigurationError,
    MemberAlreadyExistsError,
    NoSuchObjectError,
)
from ldaptasks.groups import MEMBER_ATTRIBUTE, add_user_to_group

from .fakes import fake_client_class

USER_DN = "CN=Tes Tuser,ou=users,dc=wimpi,dc=net"
GROUP_DN = "cn=admin,ou=roles,dc=wimpi,dc=net"


class TestAddUserToGroup(unittest.TestCase):
    """Adding a user to a group's ``member`` attribute."""

    def setUp(self):
        self.config = ConnectionConfig(
            host="dc.example.com", user="cn=admin,dc=example,dc=com", password="admin"
        )

    def test_success(self):
        """The user DN is added to the group's ``member`` values."""
        client_class = fake_client_class()
        result = add_user_to_group(AddToGroupInput(USER_DN, GROUP_DN), self.config, client_class)
        self.assertTrue(result.success)
        self.assertIsNone(result.error)
        self.assertFalse(result.already_member)
        self.assertEqual(result.user_dn, USER_DN)
        self.assertEqual(result.group_dn, GROUP_DN)
        client = client_class.instances[0]
        self.assertEqual(client.modifications, [(GROUP_DN, MEMBER_ATTRIBUTE, [USER_DN])])
        self.assertTrue(client.closed)

    def test_already_member_throw(self):
        """With ``throw`` an existing membership is raised to the caller."""
        client_class = fake_client_class(add_error=MemberAlreadyExistsError("exists"))
        with self.assertRaises(MemberAlreadyExistsError):
            add_user_to_group(AddToGroupInput(USER_DN, GROUP_DN), self.config, client_class)
        self.assertTrue(client_class.instances[0].closed)

    def test_already_member_skip(self):
        """With ``skip`` an existing membership is reported as success."""
        client_class = fake_client_class(add_error=MemberAlreadyExistsError("exists"))
        result = add_user_to_group(
            AddToGroupInput(USER_DN, GROUP_DN, UserExistsAction.SKIP),
            self.config,
            client_class,
        )
        self.assertTrue(result.success)
        self.assertTrue(result.already_member)
        self.assertIsNone(result.error)

    def test_missing_group(self):
        """Other directory failures are failed results."""
        client_class = fake_client_class(add_error=NoSuchObjectError("No such object"))
        result = add_user_to_group(AddToGroupInput(USER_DN, GROUP_DN), self.config, client_class)
        self.assertFalse(result.success)
        self.assertEqual(result.error, "No such object")

    def test_bind_rejected(self):
        """A rejected bind is a failed result."""
        client_class = fake_client_class(bind_error=AuthenticationError("Bind failed"))
        result = add_user_to_group(AddToGroupInput(USER_DN, GROUP_DN), self.config, client_class)
        self.assertFalse(result.success)
        self.assertEqual(client_class.instances[0].modifications, [])

    def test_missing_dn(self):
        """Blank DNs are rejected before connecting."""
        client_class = fake_client_class()
        with self.assertRaises(ConfigurationError):
            add_user_to_group(AddToGroupInput("", GROUP_DN), self.config, client_class)
        self.assertEqual(client_class.instances, [])


if __name__ == "__main__":
    unittest.main()
