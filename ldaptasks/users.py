"""
The delete-user task.
"""

import logging

from . import ldap
from .backends.base import DirectoryClient
from .backends.python_ldap_client import PythonLdapClient
from .config import ConnectionConfig
from .connection import open_connection
from .definitions import DeleteUserInput
from .exceptions import ConfigurationError, DirectoryError
from .models import DeleteUserResult

logger = logging.getLogger(__name__)


def split_dn(dn: str) -> tuple[str, str]:
    """
    Split ``dn`` into the value of its leading RDN and the DN of its container.

    Example:
        >>> split_dn("CN=Firstname Lastname,CN=Users,DC=Example,DC=Com")
        ('Firstname Lastname', 'CN=Users,DC=Example,DC=Com')

    Raises:
        ConfigurationError: ``dn`` is not a valid DN

    """
    try:
        rdns = ldap.dn.str2dn(dn)
    except ldap.DECODING_ERROR as e:  # type: ignore[attr-defined]
        msg = f"Invalid distinguished name: {dn}"
        raise ConfigurationError(msg) from e
    if not rdns:
        msg = f"Invalid distinguished name: {dn}"
        raise ConfigurationError(msg)
    return rdns[0][0][1], ldap.dn.dn2str(rdns[1:])


def delete_user(
    task_input: DeleteUserInput,
    config: ConnectionConfig,
    client_class: type[DirectoryClient] = PythonLdapClient,
) -> DeleteUserResult:
    """
    Delete the entry named by ``task_input.distinguished_name``.

    Args:
        task_input: what to delete
        config: how to connect

    Keyword Args:
        client_class: the directory client implementation to use

    Raises:
        ConfigurationError: the DN or the connection configuration is invalid

    Returns:
        ``success=True`` if the entry was deleted, otherwise ``success=False``
        and the server's message.  ``common_name`` and ``path`` are filled in
        either way.

    """
    task_input.validate()
    dn = task_input.distinguished_name
    common_name, path = split_dn(dn)
    try:
        with open_connection(config, client_class=client_class) as client:
            client.delete(dn)
    except DirectoryError as e:
        logger.warning("ldaptasks.users.delete.failed dn=%s error=%s", dn, e)
        return DeleteUserResult(
            success=False, error=str(e), common_name=common_name, path=path
        )
    logger.info("ldaptasks.users.delete.success dn=%s", dn)
    return DeleteUserResult(success=True, error=None, common_name=common_name, path=path)
