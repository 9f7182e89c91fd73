"""
The add-user-to-group task.
"""

import logging

from .backends.base import DirectoryClient
from .backends.python_ldap_client import PythonLdapClient
from .config import ConnectionConfig
from .connection import open_connection
from .definitions import AddToGroupInput, UserExistsAction
from .exceptions import DirectoryError, MemberAlreadyExistsError
from .models import AddToGroupResult

logger = logging.getLogger(__name__)

#: The group attribute that holds member DNs.
MEMBER_ATTRIBUTE = "member"


def add_user_to_group(
    task_input: AddToGroupInput,
    config: ConnectionConfig,
    client_class: type[DirectoryClient] = PythonLdapClient,
) -> AddToGroupResult:
    """
    Add ``task_input.user_dn`` to the ``member`` attribute of
    ``task_input.group_dn``.

    Args:
        task_input: who to add to which group, and what to do if they are
            already there
        config: how to connect

    Keyword Args:
        client_class: the directory client implementation to use

    Raises:
        ConfigurationError: a DN or the connection configuration is missing
        MemberAlreadyExistsError: the user is already a member and
            ``user_exists_action`` is :py:attr:`UserExistsAction.THROW`

    Returns:
        ``success=True`` when the user is now a member.  ``already_member`` is
        set when they were one before and we skipped the modify.  Any other
        directory failure gives ``success=False`` and the server's message.

    """
    task_input.validate()
    user_dn = task_input.user_dn
    group_dn = task_input.group_dn
    try:
        with open_connection(config, client_class=client_class) as client:
            client.add_values(group_dn, MEMBER_ATTRIBUTE, [user_dn])
    except MemberAlreadyExistsError:
        if task_input.user_exists_action == UserExistsAction.THROW:
            raise
        logger.info(
            "ldaptasks.groups.add.already_member user=%s group=%s", user_dn, group_dn
        )
        return AddToGroupResult(
            success=True,
            error=None,
            user_dn=user_dn,
            group_dn=group_dn,
            already_member=True,
        )
    except DirectoryError as e:
        logger.warning(
            "ldaptasks.groups.add.failed user=%s group=%s error=%s", user_dn, group_dn, e
        )
        return AddToGroupResult(
            success=False, error=str(e), user_dn=user_dn, group_dn=group_dn
        )
    logger.info("ldaptasks.groups.add.success user=%s group=%s", user_dn, group_dn)
    return AddToGroupResult(success=True, error=None, user_dn=user_dn, group_dn=group_dn)
