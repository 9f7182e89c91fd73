# This file is here so that we can patch the ldap module in our tests.
# python-ldap-faker patches ``<module>.ldap``, so the python-ldap backend
# reaches python-ldap only through this module.
import ldap
import ldap.dn
from ldap import *  # noqa: F403
from ldap.controls import SimplePagedResultsControl  # noqa: F401

__version__ = ldap.__version__
dn = ldap.dn
