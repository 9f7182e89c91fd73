"""
Opening and releasing directory connections.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from .backends.base import DirectoryClient
from .backends.python_ldap_client import PythonLdapClient
from .config import ConnectionConfig

logger = logging.getLogger(__name__)


def establish(
    config: ConnectionConfig, client_class: type[DirectoryClient] = PythonLdapClient
) -> DirectoryClient:
    """
    Validate ``config``, then connect and bind a new client.

    The caller owns the returned client and must :py:meth:`~DirectoryClient.close`
    it.  If connecting or binding fails, the partially opened client is closed
    before the exception propagates.

    Args:
        config: the connection configuration

    Keyword Args:
        client_class: the :py:class:`DirectoryClient` implementation to use

    Raises:
        ConfigurationError: ``config`` is invalid; nothing was constructed
        ConnectivityError: the host could not be reached or TLS failed
        AuthenticationError: the bind was rejected

    Returns:
        A connected and bound client.

    """
    config.validate()
    client = client_class(config)
    try:
        client.connect()
        client.bind()
    except BaseException:
        client.close()
        raise
    logger.info(
        "ldaptasks.connection.open uri=%s backend=%s tls=%s",
        config.uri,
        client_class.__name__,
        config.tls_mode.value,
    )
    return client


@contextmanager
def open_connection(
    config: ConnectionConfig, client_class: type[DirectoryClient] = PythonLdapClient
) -> Iterator[DirectoryClient]:
    """
    Context manager around :py:func:`establish` that always closes the client.

    Example:
        >>> with open_connection(config) as client:
        ...     client.delete("cn=old,ou=users,dc=example,dc=com")

    """
    client = establish(config, client_class=client_class)
    try:
        yield client
    finally:
        # We do this in a finally: branch so that the connection, and any
        # TLS layer on it, is torn down no matter what happens in the body.
        client.close()
        logger.debug("ldaptasks.connection.close uri=%s", config.uri)
