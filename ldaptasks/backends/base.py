"""
The directory client interface.

The paged search driver and the auxiliary tasks talk to the directory only
through :py:class:`DirectoryClient`.  Each supported client library gets one
subclass; they differ mostly in how the paged results control is attached to
a request and read back from the response.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..config import ConnectionConfig
from ..definitions import SearchRequestSpec
from ..typing import LDAPData

logger = logging.getLogger(__name__)

#: OID of the Simple Paged Results control (RFC 2696).
PAGING_OID = "1.2.840.113556.1.4.319"


@dataclass(frozen=True)
class PageRequest:
    """
    One round trip of a paged search.

    Args:
        spec: the search being run

    Keyword Args:
        cookie: the cookie from the previous page; empty for the first page

    """

    spec: SearchRequestSpec
    cookie: bytes = b""

    @property
    def page_size(self) -> int:
        return self.spec.page_size


@dataclass(frozen=True)
class PageResponse:
    """
    What came back for one :py:class:`PageRequest`.

    ``cookie`` is empty when the server says there are no more pages, or when
    it did not send a paged results control at all.
    """

    entries: list[LDAPData] = field(default_factory=list)
    cookie: bytes = b""

    @property
    def is_last(self) -> bool:
        return not self.cookie


class DirectoryClient(ABC):
    """
    A single connection to a directory server.

    Use :py:func:`~ldaptasks.connection.open_connection` rather than calling
    :py:meth:`connect`, :py:meth:`bind` and :py:meth:`close` yourself; it
    validates the configuration first and always closes the connection.

    Args:
        config: the connection configuration

    """

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        #: ``True`` once StartTLS has been negotiated on this connection.
        self.tls_started: bool = False

    @abstractmethod
    def connect(self) -> None:
        """
        Open the transport and negotiate StartTLS if configured.

        Raises:
            ConnectivityError: the host is unreachable or TLS failed

        """

    @abstractmethod
    def bind(self) -> None:
        """
        Bind anonymously or with the configured credentials.

        Raises:
            AuthenticationError: the server rejected the credentials
            ConnectivityError: the connection dropped

        """

    @abstractmethod
    def search(self, request: PageRequest) -> PageResponse:
        """
        Run one page of a paged search and wait for all of its entries.

        Raises:
            DirectoryError: the server rejected the search

        """

    @abstractmethod
    def add_values(self, dn: str, attribute: str, values: list[str]) -> None:
        """
        Add ``values`` to ``attribute`` on the entry ``dn``.

        Raises:
            MemberAlreadyExistsError: one of the values is already present
            NoSuchObjectError: ``dn`` does not exist
            DirectoryError: any other failure

        """

    @abstractmethod
    def delete(self, dn: str) -> None:
        """
        Delete the entry ``dn``.

        Raises:
            NoSuchObjectError: ``dn`` does not exist
            DirectoryError: any other failure

        """

    @abstractmethod
    def close(self) -> None:
        """
        Unbind and drop the connection, tearing down TLS with it.  Must be
        safe to call after a partial :py:meth:`connect`, and must not raise.
        """
