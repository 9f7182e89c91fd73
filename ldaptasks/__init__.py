"""
LDAP tasks
==========

Paged LDAP/Active Directory searches with attribute type coercion, plus
add-user-to-group and delete-user tasks.

    >>> from ldaptasks import ConnectionConfig, SearchRequestSpec, search_objects
    >>> outcome = search_objects(
    ...     SearchRequestSpec(search_base="ou=users,dc=example,dc=com"),
    ...     ConnectionConfig(host="dc.example.com", user="u", password="p"),
    ... )
"""

from .cancellation import CancellationToken
from .config import ConnectionConfig, TLSMode
from .definitions import (
    AddToGroupInput,
    AttributeReturnType,
    AttributeSpec,
    DeleteUserInput,
    Dereference,
    Scope,
    SearchRequestSpec,
    UserExistsAction,
)
from .groups import add_user_to_group
from .models import (
    AddToGroupResult,
    DeleteUserResult,
    DirectoryEntry,
    ListValue,
    ScalarValue,
    SearchOutcome,
)
from .search import PagedSearch, search_objects
from .users import delete_user

__version__ = "1.0.0"

__all__ = [
    "AddToGroupInput",
    "AddToGroupResult",
    "AttributeReturnType",
    "AttributeSpec",
    "CancellationToken",
    "ConnectionConfig",
    "DeleteUserInput",
    "DeleteUserResult",
    "Dereference",
    "DirectoryEntry",
    "ListValue",
    "PagedSearch",
    "ScalarValue",
    "Scope",
    "SearchOutcome",
    "SearchRequestSpec",
    "TLSMode",
    "UserExistsAction",
    "add_user_to_group",
    "delete_user",
    "search_objects",
]
