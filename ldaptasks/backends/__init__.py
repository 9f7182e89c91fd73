from .base import DirectoryClient, PageRequest, PageResponse
from .ldap3_client import Ldap3Client
from .python_ldap_client import PythonLdapClient

__all__ = [
    "DirectoryClient",
    "Ldap3Client",
    "PageRequest",
    "PageResponse",
    "PythonLdapClient",
]
