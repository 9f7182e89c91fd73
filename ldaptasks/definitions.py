"""
Input definitions for the LDAP tasks.

These are the caller-facing descriptions of what to search for, how to shape
the returned attribute values, and what the auxiliary tasks should act on.
All of them are immutable once constructed.  Enum-valued fields also accept
the enum's string value, so that inputs can come straight from JSON.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from .exceptions import ConfigurationError, ProtocolError

#: The page size used when the caller gives us zero or a negative number.
DEFAULT_PAGE_SIZE = 500
#: The filter used when the caller gives us an empty one.
MATCH_ALL_FILTER = "(objectClass=*)"

E = TypeVar("E", bound=Enum)


def _parse_enum(enum_class: type[E], value: Any, label: str) -> E:
    """
    Turn ``value`` into a member of ``enum_class``.

    Args:
        enum_class: the enum to parse into
        value: an ``enum_class`` member or one of its values
        label: what to call the value in the error message

    Raises:
        ProtocolError: ``value`` is not a member or value of ``enum_class``

    Returns:
        The matching enum member.

    """
    if isinstance(value, enum_class):
        return value
    try:
        return enum_class(value)
    except ValueError as e:
        msg = f"Invalid {label}: {value!r}"
        raise ProtocolError(msg) from e


class Scope(Enum):
    """
    The depth of a search.
    """

    #: Only the entry named by the search base.
    BASE = "base"
    #: The immediate children of the search base.
    ONE_LEVEL = "one_level"
    #: The search base and all of its descendants.
    SUBTREE = "subtree"

    @classmethod
    def parse(cls, value: Any) -> "Scope":
        return _parse_enum(cls, value, "scope")


class Dereference(Enum):
    """
    When alias entries are dereferenced during a search.
    """

    NEVER = "never"
    SEARCHING = "searching"
    FINDING = "finding"
    ALWAYS = "always"

    @classmethod
    def parse(cls, value: Any) -> "Dereference":
        return _parse_enum(cls, value, "dereference policy")


class AttributeReturnType(Enum):
    """
    How a returned attribute value should be rendered.
    """

    #: Decoded text, or a list of texts for multi-valued attributes.
    STRING = "string"
    #: The raw bytes of the first value as an uppercase hex string.
    BYTE = "byte"
    #: The raw bytes of the first value as GUID text.
    GUID = "guid"


class UserExistsAction(Enum):
    """
    What :py:func:`~ldaptasks.groups.add_user_to_group` does when the user is
    already a member of the group.
    """

    #: Raise :py:class:`~ldaptasks.exceptions.MemberAlreadyExistsError`.
    THROW = "throw"
    #: Report success without changing anything.
    SKIP = "skip"


@dataclass(frozen=True)
class AttributeSpec:
    """
    A requested attribute and the representation we want back for it.

    Args:
        key: the attribute name, matched case-insensitively

    Keyword Args:
        return_type: how to render the attribute's value

    """

    key: str
    return_type: AttributeReturnType = AttributeReturnType.STRING

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "return_type",
            _parse_enum(AttributeReturnType, self.return_type, "attribute return type"),
        )

    def matches(self, name: str) -> bool:
        return self.key.lower() == name.lower()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AttributeSpec":
        """
        Build from ``{"key": ..., "returnType": ...}``.  ``return_type`` is
        accepted as a synonym for ``returnType``.
        """
        return_type = data.get("returnType", data.get("return_type", "string"))
        if isinstance(return_type, str):
            return_type = return_type.lower()
        return cls(key=data["key"], return_type=return_type)


@dataclass(frozen=True)
class SearchRequestSpec:
    """
    What to search for and how.

    Keyword Args:
        search_base: the DN to start from; empty means the root
        scope: the depth of the search
        filter: the search filter; empty means :py:data:`MATCH_ALL_FILTER`
        attributes: the attributes to return; empty means all of them
        page_size: entries per page; zero or less means
            :py:data:`DEFAULT_PAGE_SIZE`
        max_results: stop after this many entries; ``0`` means no limit
        batch_size: how many entries to convert between cancellation checks
            while draining a page
        ms_limit: how long to wait for each page, in milliseconds; ``0``
            means wait forever
        server_time_limit: how many seconds the server may spend on each page;
            ``0`` means no limit
        dereference: when to dereference aliases
        types_only: return attribute names without values

    """

    search_base: str = ""
    scope: Scope = Scope.SUBTREE
    filter: str = ""
    attributes: tuple[AttributeSpec, ...] = field(default_factory=tuple)
    page_size: int = DEFAULT_PAGE_SIZE
    max_results: int = 0
    batch_size: int = 1
    ms_limit: int = 0
    server_time_limit: int = 0
    dereference: Dereference = Dereference.NEVER
    types_only: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "scope", Scope.parse(self.scope))
        object.__setattr__(self, "dereference", Dereference.parse(self.dereference))
        object.__setattr__(self, "search_base", self.search_base or "")
        object.__setattr__(self, "filter", self.filter or "")
        if not self.page_size or self.page_size <= 0:
            object.__setattr__(self, "page_size", DEFAULT_PAGE_SIZE)
        if not self.batch_size or self.batch_size <= 0:
            object.__setattr__(self, "batch_size", 1)
        if self.max_results < 0:
            msg = f"max_results must not be negative: {self.max_results}"
            raise ConfigurationError(msg)
        attributes = tuple(
            AttributeSpec.from_dict(attr) if isinstance(attr, dict) else attr
            for attr in self.attributes or ()
        )
        object.__setattr__(self, "attributes", attributes)

    @property
    def search_filter(self) -> str:
        """
        The filter to send to the server.
        """
        return self.filter or MATCH_ALL_FILTER

    @property
    def attribute_names(self) -> list[str] | None:
        """
        The attribute list to send to the server, or ``None`` for all
        attributes.
        """
        if not self.attributes:
            return None
        return [attr.key for attr in self.attributes]


@dataclass(frozen=True)
class AddToGroupInput:
    """
    Input for :py:func:`~ldaptasks.groups.add_user_to_group`.

    Args:
        user_dn: the DN of the user to add, e.g.
            ``CN=Tes Tuser,ou=users,dc=wimpi,dc=net``
        group_dn: the DN of the group, e.g. ``cn=admin,ou=roles,dc=wimpi,dc=net``

    Keyword Args:
        user_exists_action: what to do when the user is already a member

    """

    user_dn: str
    group_dn: str
    user_exists_action: UserExistsAction = UserExistsAction.THROW

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "user_exists_action",
            _parse_enum(UserExistsAction, self.user_exists_action, "user exists action"),
        )

    def validate(self) -> None:
        if not self.user_dn or not self.user_dn.strip():
            msg = "User distinguished name is missing."
            raise ConfigurationError(msg)
        if not self.group_dn or not self.group_dn.strip():
            msg = "Group distinguished name is missing."
            raise ConfigurationError(msg)


@dataclass(frozen=True)
class DeleteUserInput:
    """
    Input for :py:func:`~ldaptasks.users.delete_user`.

    Args:
        distinguished_name: the DN of the entry to delete

    """

    distinguished_name: str

    def validate(self) -> None:
        if not self.distinguished_name or not self.distinguished_name.strip():
            msg = "Distinguished name is missing."
            raise ConfigurationError(msg)
