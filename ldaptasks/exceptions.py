"""
Exceptions raised by the LDAP tasks.

Caller mistakes are reported as :py:class:`ConfigurationError` before any
network traffic happens.  Everything the directory server or the transport
reports is a :py:class:`DirectoryError` subclass, so that task entry points
can turn those into failure results.  :py:class:`SearchCancelled` is kept
outside of that tree on purpose: a cancelled search is neither a success nor
a server failure.
"""


class LdapTaskError(Exception):
    """
    Base class for all exceptions raised by :py:mod:`ldaptasks`.
    """


class ConfigurationError(LdapTaskError):
    """
    The connection configuration or the task input is invalid.
    """


class DirectoryError(LdapTaskError):
    """
    The directory server or the transport to it reported a failure.
    """


class ConnectivityError(DirectoryError):
    """
    The directory host could not be reached, or TLS negotiation failed.
    """


class AuthenticationError(DirectoryError):
    """
    The directory server rejected our bind.
    """


class ProtocolError(DirectoryError):
    """
    A value could not be mapped onto the LDAP protocol, or the server sent us
    something we could not interpret.
    """


class NoSuchObjectError(DirectoryError):
    """
    The entry named in an operation does not exist.
    """


class MemberAlreadyExistsError(DirectoryError):
    """
    The value we tried to add to a multi-valued attribute is already there.
    """


class SearchCancelled(LdapTaskError):  # noqa: N818
    """
    A paged search was cancelled through its
    :py:class:`~ldaptasks.cancellation.CancellationToken`.

    Args:
        pages: the number of pages fetched before the cancellation was seen

    """

    def __init__(self, pages: int = 0) -> None:
        self.pages = pages
        super().__init__(f"Search cancelled after {pages} page(s).")
