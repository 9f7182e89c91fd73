"""
Cooperative cancellation for long running searches.
"""

import threading

from .exceptions import SearchCancelled


class CancellationToken:
    """
    A flag that one thread sets and a running search polls.

    The search driver checks the token before its first request, every
    ``batch_size`` entries while converting a page, and before each follow-up
    page request.  A request that is already on the wire is not interrupted.

    Example:
        >>> token = CancellationToken()
        >>> worker = threading.Thread(
        ...     target=search_objects, args=(request, config, token)
        ... )
        >>> worker.start()
        >>> token.cancel()

    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, pages: int = 0) -> None:
        """
        Raise :py:class:`~ldaptasks.exceptions.SearchCancelled` if
        :py:meth:`cancel` has been called.

        Keyword Args:
            pages: the number of pages fetched so far, for the exception

        Raises:
            SearchCancelled: the token has been cancelled

        """
        if self._event.is_set():
            raise SearchCancelled(pages=pages)
