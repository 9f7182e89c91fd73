"""
:py:class:`~ldaptasks.backends.base.DirectoryClient` implemented with
python-ldap.

Paging uses :py:class:`ldap.controls.SimplePagedResultsControl`: every page is
a ``search_ext`` carrying a fresh control with the previous page's cookie,
followed by a blocking ``result3`` that collects the whole page.
"""

import logging
from typing import Any

from .. import ldap
from ..config import ConnectionConfig, TLSMode
from ..exceptions import (
    AuthenticationError,
    ConnectivityError,
    DirectoryError,
    MemberAlreadyExistsError,
    NoSuchObjectError,
)
from ..translate import python_ldap_dereference, python_ldap_scope
from ..typing import LDAPData
from .base import DirectoryClient, PageRequest, PageResponse

logger = logging.getLogger(__name__)

#: Errors that mean we lost, or never had, a working transport.
CONNECTIVITY_ERRORS = (ldap.SERVER_DOWN, ldap.CONNECT_ERROR, ldap.TIMEOUT)  # type: ignore[attr-defined]
#: Errors a server may send back for a bind it does not accept.
BIND_REJECTED_ERRORS = (
    ldap.INVALID_CREDENTIALS,  # type: ignore[attr-defined]
    ldap.INAPPROPRIATE_AUTH,  # type: ignore[attr-defined]
    ldap.STRONG_AUTH_REQUIRED,  # type: ignore[attr-defined]
    ldap.UNWILLING_TO_PERFORM,  # type: ignore[attr-defined]
)
#: Errors for adding a value that is already present.  Active Directory sends
#: ``ALREADY_EXISTS`` for a duplicate ``member``; other servers send
#: ``TYPE_OR_VALUE_EXISTS``.
VALUE_EXISTS_ERRORS = (ldap.TYPE_OR_VALUE_EXISTS, ldap.ALREADY_EXISTS)  # type: ignore[attr-defined]


def describe_ldap_error(error: Exception) -> str:
    """
    Build a human readable message from a python-ldap exception.

    python-ldap puts a dict with ``desc`` and usually ``info`` keys in
    ``error.args[0]``.
    """
    details: Any = error.args[0] if error.args else None
    if isinstance(details, dict):
        desc = details.get("desc", "")
        info = details.get("info", "")
        if isinstance(info, (list, tuple)):
            info = " ".join(str(i) for i in info)
        if desc and info:
            return f"{desc}: {info}"
        if desc or info:
            return desc or info
    return str(error) or error.__class__.__name__


def translate_ldap_error(
    error: Exception, default: type[DirectoryError] = DirectoryError
) -> DirectoryError:
    """
    Map a python-ldap exception onto our exception hierarchy.

    Args:
        error: the python-ldap exception

    Keyword Args:
        default: the class to use when nothing more specific applies

    Returns:
        An exception instance ready to be raised.

    """
    message = describe_ldap_error(error)
    if isinstance(error, CONNECTIVITY_ERRORS):
        return ConnectivityError(message)
    if isinstance(error, ldap.NO_SUCH_OBJECT):  # type: ignore[attr-defined]
        return NoSuchObjectError(message)
    return default(message)


class PythonLdapClient(DirectoryClient):
    """
    A directory connection through python-ldap's ``LDAPObject``.
    """

    def __init__(self, config: ConnectionConfig) -> None:
        super().__init__(config)
        self._connection: Any = None

    @property
    def connection(self) -> Any:
        """
        The underlying ``LDAPObject``.

        Raises:
            ConnectivityError: :py:meth:`connect` has not been called

        """
        if self._connection is None:
            msg = "Not connected."
            raise ConnectivityError(msg)
        return self._connection

    def connect(self) -> None:
        config = self.config
        try:
            ldap_object = ldap.initialize(config.uri)  # type: ignore[attr-defined]
            ldap_object.protocol_version = ldap.VERSION3  # type: ignore[attr-defined]
            ldap_object.set_option(
                ldap.OPT_REFERRALS,  # type: ignore[attr-defined]
                1 if config.follow_referrals else 0,
            )
            ldap_object.set_option(ldap.OPT_NETWORK_TIMEOUT, float(config.timeout))  # type: ignore[attr-defined]
            if config.ignore_certificates:
                ldap_object.set_option(
                    ldap.OPT_X_TLS_REQUIRE_CERT,  # type: ignore[attr-defined]
                    ldap.OPT_X_TLS_NEVER,  # type: ignore[attr-defined]
                )
            else:
                ldap_object.set_option(
                    ldap.OPT_X_TLS_REQUIRE_CERT,  # type: ignore[attr-defined]
                    ldap.OPT_X_TLS_DEMAND,  # type: ignore[attr-defined]
                )
            if config.tls_ca_certfile:
                ldap_object.set_option(ldap.OPT_X_TLS_CACERTFILE, config.tls_ca_certfile)  # type: ignore[attr-defined]
            # The TLS options above only take effect in a new TLS context.
            ldap_object.set_option(ldap.OPT_X_TLS_NEWCTX, 0)  # type: ignore[attr-defined]
            self._connection = ldap_object
            if config.tls_mode == TLSMode.START_TLS:
                ldap_object.start_tls_s()
                self.tls_started = True
        except ldap.LDAPError as e:  # type: ignore[attr-defined]
            raise translate_ldap_error(e, default=ConnectivityError) from e
        logger.debug(
            "ldaptasks.python_ldap.connect uri=%s starttls=%s",
            config.uri,
            self.tls_started,
        )

    def bind(self) -> None:
        config = self.config
        try:
            if config.anonymous_bind:
                self.connection.simple_bind_s()
            else:
                self.connection.simple_bind_s(config.user, config.password or "")
        except BIND_REJECTED_ERRORS as e:
            msg = f"Bind failed for {config.user or 'anonymous'}: {describe_ldap_error(e)}"
            raise AuthenticationError(msg) from e
        except ldap.LDAPError as e:  # type: ignore[attr-defined]
            raise translate_ldap_error(e) from e
        logger.debug(
            "ldaptasks.python_ldap.bind uri=%s user=%s",
            config.uri,
            config.user if not config.anonymous_bind else "anonymous",
        )

    def _get_pctrls(self, serverctrls: list[Any] | None) -> list[Any]:
        """
        Pick the paged results controls out of the server's response controls.
        """
        return [
            c
            for c in serverctrls or []
            if c.controlType == ldap.SimplePagedResultsControl.controlType
        ]

    def search(self, request: PageRequest) -> PageResponse:
        spec = request.spec
        paging = ldap.SimplePagedResultsControl(
            True,  # noqa: FBT003
            size=request.page_size,
            cookie=request.cookie or b"",
        )
        scope = python_ldap_scope(spec.scope)
        deref = python_ldap_dereference(spec.dereference)
        timeout = spec.ms_limit / 1000.0 if spec.ms_limit > 0 else None
        try:
            self.connection.deref = deref
            msgid = self.connection.search_ext(
                spec.search_base,
                scope,
                spec.search_filter,
                spec.attribute_names,
                attrsonly=int(spec.types_only),
                serverctrls=[paging],
                timeout=spec.server_time_limit if spec.server_time_limit > 0 else -1,
            )
            _rtype, rdata, _rmsgid, serverctrls = self.connection.result3(
                msgid, timeout=timeout
            )
        except ldap.LDAPError as e:  # type: ignore[attr-defined]
            raise translate_ldap_error(e) from e
        # Active Directory appends search references (dn of None, a list of
        # URLs instead of an attribute dict); those are not entries.
        entries: list[LDAPData] = [
            (dn, attrs) for dn, attrs in rdata or [] if isinstance(attrs, dict)
        ]
        paged_controls = self._get_pctrls(serverctrls)
        cookie = b""
        if paged_controls and paged_controls[0].cookie:
            cookie = paged_controls[0].cookie
        return PageResponse(entries=entries, cookie=cookie)

    def add_values(self, dn: str, attribute: str, values: list[str]) -> None:
        modlist = [
            (ldap.MOD_ADD, attribute, [value.encode("utf-8") for value in values])  # type: ignore[attr-defined]
        ]
        try:
            self.connection.modify_s(dn, modlist)
        except VALUE_EXISTS_ERRORS as e:
            raise MemberAlreadyExistsError(describe_ldap_error(e)) from e
        except ldap.LDAPError as e:  # type: ignore[attr-defined]
            raise translate_ldap_error(e) from e

    def delete(self, dn: str) -> None:
        try:
            self.connection.delete_s(dn)
        except ldap.LDAPError as e:  # type: ignore[attr-defined]
            raise translate_ldap_error(e) from e

    def close(self) -> None:
        if self._connection is None:
            return
        try:
            self._connection.unbind_s()
        except ldap.LDAPError as e:  # type: ignore[attr-defined]
            logger.warning(
                "ldaptasks.python_ldap.close.failed uri=%s error=%s",
                self.config.uri,
                describe_ldap_error(e),
            )
        finally:
            self._connection = None
            self.tls_started = False
