"""
LDAP task type definitions.

Type aliases for the raw data that flows between the directory client
backends and the search driver.
"""

from typing import Any

#: Attribute name to list of raw values, in the order the server sent them.
RawAttributes = dict[str, list[bytes]]
#: A single search result entry as returned by a backend.
LDAPData = tuple[str, RawAttributes]
#: A plain Python rendering of a coerced attribute value.
PlainValue = str | list[str]
#: A settings dictionary used to build a connection configuration.
SettingsDict = dict[str, Any]
