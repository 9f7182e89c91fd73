"""
Result types returned by the LDAP tasks.

A coerced attribute value is either a :py:class:`ScalarValue` or a
:py:class:`ListValue`.  Code that consumes entries should branch on the type
rather than guess from the Python value, and can use ``to_python()`` when it
only needs a plain ``str`` or ``list[str]``.
"""

from dataclasses import dataclass, field
from typing import Any

from .typing import PlainValue


@dataclass(frozen=True)
class ScalarValue:
    """
    A single string value.
    """

    value: str

    def to_python(self) -> PlainValue:
        return self.value


@dataclass(frozen=True)
class ListValue:
    """
    An ordered sequence of string values, in the order the server sent them.
    """

    values: tuple[str, ...] = ()

    def to_python(self) -> PlainValue:
        return list(self.values)


AttributeValue = ScalarValue | ListValue


@dataclass(frozen=True)
class Attribute:
    """
    One named attribute on a :py:class:`DirectoryEntry`.
    """

    key: str
    value: AttributeValue

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "value": self.value.to_python()}


@dataclass(frozen=True)
class DirectoryEntry:
    """
    A search result entry: its DN plus its coerced attributes in server order.
    """

    distinguished_name: str
    attributes: tuple[Attribute, ...] = ()

    def get(self, key: str) -> AttributeValue | None:
        """
        Return the value of the attribute named ``key`` (case-insensitive), or
        ``None`` if the entry does not have it.
        """
        key = key.lower()
        for attribute in self.attributes:
            if attribute.key.lower() == key:
                return attribute.value
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "distinguishedName": self.distinguished_name,
            "attributes": [attribute.to_dict() for attribute in self.attributes],
        }


@dataclass(frozen=True)
class SearchOutcome:
    """
    The result of :py:func:`~ldaptasks.search.search_objects`.

    ``entries`` is only populated on success.  ``error`` is set exactly when
    the search failed; a cancelled search has neither entries nor an error,
    only ``cancelled=True``.
    """

    success: bool
    error: str | None = None
    entries: tuple[DirectoryEntry, ...] = field(default_factory=tuple)
    cancelled: bool = False

    @classmethod
    def succeeded(cls, entries: list[DirectoryEntry]) -> "SearchOutcome":
        return cls(success=True, entries=tuple(entries))

    @classmethod
    def failed(cls, error: str) -> "SearchOutcome":
        return cls(success=False, error=error)

    @classmethod
    def cancelled_outcome(cls) -> "SearchOutcome":
        return cls(success=False, cancelled=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "error": self.error,
            "cancelled": self.cancelled,
            "entries": [entry.to_dict() for entry in self.entries],
        }


@dataclass(frozen=True)
class AddToGroupResult:
    """
    The result of :py:func:`~ldaptasks.groups.add_user_to_group`.

    ``already_member`` is ``True`` when the user was in the group before we
    started and the caller asked us to skip that case.
    """

    success: bool
    error: str | None
    user_dn: str
    group_dn: str
    already_member: bool = False


@dataclass(frozen=True)
class DeleteUserResult:
    """
    The result of :py:func:`~ldaptasks.users.delete_user`.

    ``common_name`` is the value of the entry's leading RDN (``Firstname
    Lastname``) and ``path`` is the DN of its container
    (``CN=Users,DC=Example,DC=Com``).
    """

    success: bool
    error: str | None
    common_name: str
    path: str
