"""
Translate caller-facing search options into client library wire values.

These are pure functions.  Both backends call them when building a search
request, so an option that slipped past :py:class:`~ldaptasks.definitions.SearchRequestSpec`
still fails here with :py:class:`~ldaptasks.exceptions.ProtocolError`.
"""

from typing import Any

import ldap3

from . import ldap
from .definitions import Dereference, Scope
from .exceptions import ProtocolError

#: :py:class:`Scope` to python-ldap ``SCOPE_*`` constants.
PYTHON_LDAP_SCOPES: dict[Scope, int] = {
    Scope.BASE: ldap.SCOPE_BASE,  # type: ignore[attr-defined]
    Scope.ONE_LEVEL: ldap.SCOPE_ONELEVEL,  # type: ignore[attr-defined]
    Scope.SUBTREE: ldap.SCOPE_SUBTREE,  # type: ignore[attr-defined]
}

#: :py:class:`Dereference` to python-ldap ``DEREF_*`` constants.
PYTHON_LDAP_DEREFS: dict[Dereference, int] = {
    Dereference.NEVER: ldap.DEREF_NEVER,  # type: ignore[attr-defined]
    Dereference.SEARCHING: ldap.DEREF_SEARCHING,  # type: ignore[attr-defined]
    Dereference.FINDING: ldap.DEREF_FINDING,  # type: ignore[attr-defined]
    Dereference.ALWAYS: ldap.DEREF_ALWAYS,  # type: ignore[attr-defined]
}

#: :py:class:`Scope` to ldap3 scope names.
LDAP3_SCOPES: dict[Scope, str] = {
    Scope.BASE: ldap3.BASE,
    Scope.ONE_LEVEL: ldap3.LEVEL,
    Scope.SUBTREE: ldap3.SUBTREE,
}

#: :py:class:`Dereference` to ldap3 dereference names.
LDAP3_DEREFS: dict[Dereference, str] = {
    Dereference.NEVER: ldap3.DEREF_NEVER,
    Dereference.SEARCHING: ldap3.DEREF_SEARCH,
    Dereference.FINDING: ldap3.DEREF_BASE,
    Dereference.ALWAYS: ldap3.DEREF_ALWAYS,
}


def _lookup(table: dict[Any, Any], value: Any, label: str) -> Any:
    try:
        return table[value]
    except (KeyError, TypeError) as e:
        msg = f"Invalid {label}: {value!r}"
        raise ProtocolError(msg) from e


def python_ldap_scope(scope: Scope) -> int:
    """
    Map ``scope`` onto python-ldap's ``SCOPE_*`` constant.

    Raises:
        ProtocolError: ``scope`` is not a :py:class:`Scope`

    """
    return _lookup(PYTHON_LDAP_SCOPES, scope, "scope")


def python_ldap_dereference(deref: Dereference) -> int:
    """
    Map ``deref`` onto python-ldap's ``DEREF_*`` constant.

    Raises:
        ProtocolError: ``deref`` is not a :py:class:`Dereference`

    """
    return _lookup(PYTHON_LDAP_DEREFS, deref, "dereference policy")


def ldap3_scope(scope: Scope) -> str:
    """
    Map ``scope`` onto ldap3's ``BASE``/``LEVEL``/``SUBTREE``.

    Raises:
        ProtocolError: ``scope`` is not a :py:class:`Scope`

    """
    return _lookup(LDAP3_SCOPES, scope, "scope")


def ldap3_dereference(deref: Dereference) -> str:
    """
    Map ``deref`` onto ldap3's ``DEREF_*`` names.

    Raises:
        ProtocolError: ``deref`` is not a :py:class:`Dereference`

    """
    return _lookup(LDAP3_DEREFS, deref, "dereference policy")


def parse_scope(value: Any) -> Scope:
    """
    Accept a :py:class:`Scope` or one of its string values.

    Raises:
        ProtocolError: ``value`` is not a known scope

    """
    return Scope.parse(value)


def parse_dereference(value: Any) -> Dereference:
    """
    Accept a :py:class:`Dereference` or one of its string values.

    Raises:
        ProtocolError: ``value`` is not a known dereference policy

    """
    return Dereference.parse(value)
