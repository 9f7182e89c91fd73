"""
:py:class:`~ldaptasks.backends.base.DirectoryClient` implemented with ldap3.

ldap3 handles the paged results control itself: we pass ``paged_size`` and
``paged_cookie`` to :py:meth:`ldap3.Connection.search` and read the next
cookie back out of ``connection.result["controls"]``.  The connection is
created with ``raise_exceptions=False``, so failures show up as result codes
which we map onto our own exceptions.
"""

import logging
import ssl
from typing import Any

from ldap3 import (
    ALL_ATTRIBUTES,
    ANONYMOUS,
    MODIFY_ADD,
    NONE,
    SIMPLE,
    Connection,
    Server,
    Tls,
)
from ldap3.core.exceptions import LDAPBindError, LDAPException, LDAPSocketOpenError

from ..config import ConnectionConfig, TLSMode
from ..exceptions import (
    AuthenticationError,
    ConnectivityError,
    DirectoryError,
    MemberAlreadyExistsError,
    NoSuchObjectError,
)
from ..translate import ldap3_dereference, ldap3_scope
from ..typing import LDAPData
from .base import PAGING_OID, DirectoryClient, PageRequest, PageResponse

logger = logging.getLogger(__name__)

RESULT_SUCCESS = 0
RESULT_STRONGER_AUTH_REQUIRED = 8
RESULT_ATTRIBUTE_OR_VALUE_EXISTS = 20
RESULT_NO_SUCH_OBJECT = 32
RESULT_INAPPROPRIATE_AUTHENTICATION = 48
RESULT_INVALID_CREDENTIALS = 49
RESULT_UNWILLING_TO_PERFORM = 53
RESULT_ENTRY_ALREADY_EXISTS = 68

BIND_REJECTED_RESULTS = frozenset(
    {
        RESULT_STRONGER_AUTH_REQUIRED,
        RESULT_INAPPROPRIATE_AUTHENTICATION,
        RESULT_INVALID_CREDENTIALS,
        RESULT_UNWILLING_TO_PERFORM,
    }
)
VALUE_EXISTS_RESULTS = frozenset(
    {RESULT_ATTRIBUTE_OR_VALUE_EXISTS, RESULT_ENTRY_ALREADY_EXISTS}
)


def describe_result(result: dict[str, Any] | None) -> str:
    """
    Build a human readable message from an ldap3 ``connection.result`` dict.
    """
    result = result or {}
    description = result.get("description") or ""
    message = result.get("message") or ""
    if description and message:
        return f"{description}: {message}"
    return description or message or f"LDAP result code {result.get('result')}"


def result_error(result: dict[str, Any] | None) -> DirectoryError:
    """
    Map a failed ldap3 ``connection.result`` onto our exception hierarchy.
    """
    code = (result or {}).get("result")
    message = describe_result(result)
    if code == RESULT_NO_SUCH_OBJECT:
        return NoSuchObjectError(message)
    if code in VALUE_EXISTS_RESULTS:
        return MemberAlreadyExistsError(message)
    return DirectoryError(message)


class Ldap3Client(DirectoryClient):
    """
    A directory connection through :py:class:`ldap3.Connection`.

    Note:
        ldap3 has no per-request client-side wait, so
        :py:attr:`~ldaptasks.definitions.SearchRequestSpec.ms_limit` is not
        applied here; the connection's ``receive_timeout`` comes from
        :py:attr:`~ldaptasks.config.ConnectionConfig.timeout` instead.

    """

    def __init__(self, config: ConnectionConfig) -> None:
        super().__init__(config)
        self._connection: Connection | None = None

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            msg = "Not connected."
            raise ConnectivityError(msg)
        return self._connection

    def _tls(self) -> Tls:
        tls_kwargs: dict[str, Any] = {
            "validate": ssl.CERT_NONE if self.config.ignore_certificates else ssl.CERT_REQUIRED,
        }
        if self.config.tls_ca_certfile:
            tls_kwargs["ca_certs_file"] = self.config.tls_ca_certfile
        return Tls(**tls_kwargs)

    def connect(self) -> None:
        config = self.config
        try:
            server = Server(
                config.host,
                port=config.port,
                use_ssl=config.tls_mode == TLSMode.LDAPS,
                tls=self._tls(),
                get_info=NONE,
                connect_timeout=config.timeout,
            )
            if config.anonymous_bind:
                credentials: dict[str, Any] = {"authentication": ANONYMOUS}
            else:
                credentials = {
                    "user": config.user,
                    "password": config.password or "",
                    "authentication": SIMPLE,
                }
            self._connection = Connection(
                server,
                auto_bind=False,
                auto_referrals=config.follow_referrals,
                raise_exceptions=False,
                receive_timeout=config.timeout,
                **credentials,
            )
            self._connection.open()
            if config.tls_mode == TLSMode.START_TLS:
                if not self._connection.start_tls():
                    msg = f"StartTLS failed: {describe_result(self._connection.result)}"
                    raise ConnectivityError(msg)
                self.tls_started = True
        except LDAPException as e:
            raise ConnectivityError(str(e)) from e
        logger.debug(
            "ldaptasks.ldap3.connect uri=%s starttls=%s", config.uri, self.tls_started
        )

    def bind(self) -> None:
        config = self.config
        who = config.user if not config.anonymous_bind else "anonymous"
        try:
            bound = self.connection.bind()
        except LDAPBindError as e:
            msg = f"Bind failed for {who}: {e}"
            raise AuthenticationError(msg) from e
        except LDAPSocketOpenError as e:
            raise ConnectivityError(str(e)) from e
        except LDAPException as e:
            raise DirectoryError(str(e)) from e
        if not bound:
            result = self.connection.result
            if (result or {}).get("result") in BIND_REJECTED_RESULTS:
                msg = f"Bind failed for {who}: {describe_result(result)}"
                raise AuthenticationError(msg)
            raise result_error(result)
        logger.debug("ldaptasks.ldap3.bind uri=%s user=%s", config.uri, who)

    def search(self, request: PageRequest) -> PageResponse:
        spec = request.spec
        scope = ldap3_scope(spec.scope)
        deref = ldap3_dereference(spec.dereference)
        try:
            self.connection.search(
                search_base=spec.search_base,
                search_filter=spec.search_filter,
                search_scope=scope,
                dereference_aliases=deref,
                attributes=spec.attribute_names or ALL_ATTRIBUTES,
                types_only=spec.types_only,
                time_limit=spec.server_time_limit,
                paged_size=request.page_size,
                paged_cookie=request.cookie or None,
            )
        except LDAPException as e:
            raise ConnectivityError(str(e)) from e
        result = self.connection.result or {}
        if result.get("result", RESULT_SUCCESS) != RESULT_SUCCESS:
            raise result_error(result)
        entries: list[LDAPData] = [
            (item["dn"], dict(item.get("raw_attributes") or {}))
            for item in self.connection.response or []
            if item.get("type") == "searchResEntry"
        ]
        control = (result.get("controls") or {}).get(PAGING_OID) or {}
        cookie = (control.get("value") or {}).get("cookie") or b""
        return PageResponse(entries=entries, cookie=cookie)

    def add_values(self, dn: str, attribute: str, values: list[str]) -> None:
        try:
            ok = self.connection.modify(dn, {attribute: [(MODIFY_ADD, list(values))]})
        except LDAPException as e:
            raise ConnectivityError(str(e)) from e
        if not ok:
            raise result_error(self.connection.result)

    def delete(self, dn: str) -> None:
        try:
            ok = self.connection.delete(dn)
        except LDAPException as e:
            raise ConnectivityError(str(e)) from e
        if not ok:
            raise result_error(self.connection.result)

    def close(self) -> None:
        if self._connection is None:
            return
        try:
            self._connection.unbind()
        except LDAPException as e:
            logger.warning(
                "ldaptasks.ldap3.close.failed uri=%s error=%s", self.config.uri, e
            )
        finally:
            self._connection = None
            self.tls_started = False
