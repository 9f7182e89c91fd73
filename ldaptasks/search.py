"""
Paged directory search.

:py:class:`PagedSearch` drives the Simple Paged Results exchange over any
:py:class:`~ldaptasks.backends.base.DirectoryClient`:

1. send the first page request with an empty cookie
2. convert every entry on the page, in server order
3. stop if the server returned no cookie (or no paging control at all)
4. otherwise check for cancellation, send the cookie back, and go to 2

:py:func:`search_objects` is the task entry point.  It opens the connection,
runs the search to completion and packs everything into a
:py:class:`~ldaptasks.models.SearchOutcome`.
"""

import logging
from enum import Enum

from .backends.base import DirectoryClient, PageRequest
from .backends.python_ldap_client import PythonLdapClient
from .cancellation import CancellationToken
from .coercion import coerce_attributes
from .config import ConnectionConfig
from .connection import open_connection
from .definitions import SearchRequestSpec
from .exceptions import DirectoryError, SearchCancelled
from .models import DirectoryEntry, SearchOutcome

logger = logging.getLogger(__name__)


class SearchState(Enum):
    """
    Where a :py:class:`PagedSearch` is in its lifecycle.
    """

    #: Created, nothing sent yet.
    IDLE = "idle"
    #: A page request is on the wire.
    PAGING = "paging"
    #: Converting the entries of the page we just received.
    DRAINING = "draining"
    #: The server sent its last page; all entries were collected.
    DONE = "done"
    #: Stopped early by cancellation or an error.
    CLOSED = "closed"


class PagedSearch:
    """
    Run one paged search over an already bound client.

    A :py:class:`PagedSearch` is single use: call :py:meth:`run` once.

    Args:
        client: a connected and bound directory client
        request: what to search for

    Keyword Args:
        cancellation_token: polled before every page request and every
            ``request.batch_size`` entries while converting a page

    """

    def __init__(
        self,
        client: DirectoryClient,
        request: SearchRequestSpec,
        cancellation_token: CancellationToken | None = None,
    ) -> None:
        self.client = client
        self.request = request
        self.cancellation_token = cancellation_token or CancellationToken()
        self.state: SearchState = SearchState.IDLE
        #: The number of page requests sent so far.
        self.pages: int = 0

    def _check_cancelled(self) -> None:
        try:
            self.cancellation_token.raise_if_cancelled(pages=self.pages)
        except SearchCancelled:
            self.state = SearchState.CLOSED
            logger.warning(
                "ldaptasks.search.cancelled base=%s pages=%d",
                self.request.search_base,
                self.pages,
            )
            raise

    def run(self) -> list[DirectoryEntry]:
        """
        Fetch every page and return all entries in server order.

        Raises:
            SearchCancelled: the cancellation token was set; no entries are
                returned
            DirectoryError: a page request failed

        Returns:
            The coerced entries from all pages.

        """
        request = self.request
        results: list[DirectoryEntry] = []
        cookie = b""
        self._check_cancelled()
        try:
            while True:
                self.state = SearchState.PAGING
                self.pages += 1
                response = self.client.search(PageRequest(spec=request, cookie=cookie))
                self.state = SearchState.DRAINING
                for index, (dn, attrs) in enumerate(response.entries):
                    if index and index % request.batch_size == 0:
                        self._check_cancelled()
                    results.append(
                        DirectoryEntry(
                            distinguished_name=dn,
                            attributes=coerce_attributes(attrs, request.attributes),
                        )
                    )
                    if request.max_results and len(results) >= request.max_results:
                        break
                logger.info(
                    "ldaptasks.search.page page=%d entries=%d total=%d",
                    self.pages,
                    len(response.entries),
                    len(results),
                )
                if request.max_results and len(results) >= request.max_results:
                    logger.info(
                        "ldaptasks.search.max_results_reached max_results=%d",
                        request.max_results,
                    )
                    break
                if response.is_last:
                    break
                self._check_cancelled()
                cookie = response.cookie
        except DirectoryError:
            self.state = SearchState.CLOSED
            raise
        self.state = SearchState.DONE
        logger.info(
            "ldaptasks.search.done base=%s pages=%d total=%d",
            request.search_base,
            self.pages,
            len(results),
        )
        return results


def search_objects(
    request: SearchRequestSpec,
    config: ConnectionConfig,
    cancellation_token: CancellationToken | None = None,
    client_class: type[DirectoryClient] = PythonLdapClient,
) -> SearchOutcome:
    """
    Search the directory with paged results and return every matching entry.

    Example:
        >>> config = ConnectionConfig(
        ...     host="dc.example.com", user="u", password="p"
        ... )
        >>> request = SearchRequestSpec(
        ...     search_base="ou=users,dc=example,dc=com",
        ...     filter="(objectClass=person)",
        ...     attributes=(AttributeSpec("objectGUID", "guid"),),
        ... )
        >>> outcome = search_objects(request, config)
        >>> outcome.to_dict()["entries"][0]["attributes"]
        [{'key': 'objectGUID', 'value': '...'}]

    Args:
        request: what to search for
        config: how to connect

    Keyword Args:
        cancellation_token: set this from another thread to stop the search
        client_class: the directory client implementation to use

    Raises:
        ConfigurationError: ``config`` is invalid; no connection was attempted

    Returns:
        On success, all entries.  On a directory failure, ``success=False``
        and the error message.  On cancellation, ``cancelled=True``.  Failed
        and cancelled outcomes never carry entries.

    """
    token = cancellation_token or CancellationToken()
    try:
        with open_connection(config, client_class=client_class) as client:
            entries = PagedSearch(client, request, cancellation_token=token).run()
    except SearchCancelled:
        return SearchOutcome.cancelled_outcome()
    except DirectoryError as e:
        logger.error(
            "ldaptasks.search.failed uri=%s base=%s error=%s",
            config.uri,
            request.search_base,
            e,
        )
        return SearchOutcome.failed(str(e))
    return SearchOutcome.succeeded(entries)
