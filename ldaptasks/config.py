"""
Connection configuration for the LDAP tasks.

A :py:class:`ConnectionConfig` describes exactly one directory connection. It
can be built directly or from a settings dictionary shaped like an entry in an
``LDAP_SERVERS`` settings block::

    LDAP_SERVERS = {
        "default": {
            "url": "ldap://dc.example.com:389",
            "user": "cn=reader,dc=example,dc=com",
            "password": "secret",
            "use_starttls": True,
            "tls_verify": "always",
            "timeout": 15.0,
            "follow_referrals": False,
        },
    }

    config = ConnectionConfig.from_dict(LDAP_SERVERS["default"])
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from urllib.parse import urlparse

from .exceptions import ConfigurationError
from .typing import SettingsDict

logger = logging.getLogger(__name__)

#: The port we use when the caller gives us ``0`` or nothing at all.
DEFAULT_PORT = 389


class TLSMode(Enum):
    """
    How the transport to the directory is secured.
    """

    #: Plain LDAP.
    NONE = "none"
    #: Plain LDAP upgraded with the StartTLS extended operation before bind.
    START_TLS = "start_tls"
    #: Implicit TLS (``ldaps://``).
    LDAPS = "ldaps"


@dataclass(frozen=True)
class ConnectionConfig:
    """
    Everything needed to open and bind one directory connection.

    Warning:
        ``ignore_certificates=True`` accepts any server certificate, including
        forged ones.  Only use it against test directories.

    Args:
        host: the directory hostname

    Keyword Args:
        port: the TCP port; ``0`` means :py:data:`DEFAULT_PORT`
        user: the bind DN or user principal name
        password: the bind password
        anonymous_bind: bind anonymously instead of with ``user``/``password``
        tls_mode: how to secure the transport
        ignore_certificates: skip server certificate verification
        tls_ca_certfile: path to a PEM bundle of CA certificates to trust
        timeout: network timeout in seconds
        follow_referrals: let the client library chase referrals

    """

    host: str
    port: int = DEFAULT_PORT
    user: str | None = None
    password: str | None = None
    anonymous_bind: bool = False
    tls_mode: TLSMode = TLSMode.NONE
    ignore_certificates: bool = False
    tls_ca_certfile: str | None = None
    timeout: float = 15.0
    follow_referrals: bool = False

    def __post_init__(self) -> None:
        if not self.port:
            object.__setattr__(self, "port", DEFAULT_PORT)
        if not isinstance(self.tls_mode, TLSMode):
            try:
                object.__setattr__(self, "tls_mode", TLSMode(self.tls_mode))
            except ValueError as e:
                msg = f"Invalid TLS mode: {self.tls_mode!r}"
                raise ConfigurationError(msg) from e

    @property
    def uri(self) -> str:
        """
        The LDAP URI for this configuration.
        """
        scheme = "ldaps" if self.tls_mode == TLSMode.LDAPS else "ldap"
        return f"{scheme}://{self.host}:{self.port}"

    def validate(self) -> None:
        """
        Check that we have enough to connect with.  This does no network I/O.

        Raises:
            ConfigurationError: the host is blank, credentials are missing for a
                non-anonymous bind, or ``tls_ca_certfile`` is not a readable file

        """
        if not self.host or not self.host.strip():
            msg = "Host is missing."
            raise ConfigurationError(msg)
        if not self.anonymous_bind:
            if not self.user:
                msg = "Username is missing."
                raise ConfigurationError(msg)
            if not self.password:
                msg = "Password is missing."
                raise ConfigurationError(msg)
        if self.tls_ca_certfile:
            ca_certfile = Path(self.tls_ca_certfile)
            if not ca_certfile.exists():
                msg = f"CA Certificate file does not exist: {self.tls_ca_certfile}"
                raise ConfigurationError(msg)
            if not ca_certfile.is_file():
                msg = f"CA Certificate file is not a file: {self.tls_ca_certfile}"
                raise ConfigurationError(msg)
        if self.ignore_certificates:
            logger.warning(
                "ldaptasks.config.tls_verify_disabled host=%s", self.host
            )

    @classmethod
    def from_dict(cls, settings: SettingsDict) -> "ConnectionConfig":
        """
        Build a configuration from a settings dictionary.

        Either ``url`` or ``host`` (plus optional ``port``) must be given.  An
        ``ldaps://`` URL implies implicit TLS.

        Args:
            settings: the settings dictionary

        Raises:
            ConfigurationError: ``tls_verify`` is not ``"never"`` or
                ``"always"``, both ``use_ssl`` and ``use_starttls`` are set,
                or the URL scheme is not ``ldap`` or ``ldaps``

        Returns:
            A new :py:class:`ConnectionConfig`.

        """
        host = settings.get("host", "")
        port = int(settings.get("port", 0) or 0)
        use_ssl = bool(settings.get("use_ssl", False))
        if url := settings.get("url"):
            parsed = urlparse(url)
            if parsed.scheme not in ("ldap", "ldaps"):
                msg = f"Invalid LDAP URL: {url}"
                raise ConfigurationError(msg)
            host = parsed.hostname or ""
            port = parsed.port or port
            use_ssl = use_ssl or parsed.scheme == "ldaps"
        use_starttls = bool(settings.get("use_starttls", False))
        if use_ssl and use_starttls:
            msg = "use_ssl and use_starttls are mutually exclusive"
            raise ConfigurationError(msg)
        tls_mode = TLSMode.NONE
        if use_ssl:
            tls_mode = TLSMode.LDAPS
        elif use_starttls:
            tls_mode = TLSMode.START_TLS
        tls_verify = settings.get("tls_verify", "always")
        if tls_verify not in ("never", "always"):
            msg = f"Invalid tls_verify value: {tls_verify}"
            raise ConfigurationError(msg)
        return cls(
            host=host,
            port=port,
            user=settings.get("user"),
            password=settings.get("password"),
            anonymous_bind=bool(settings.get("anonymous_bind", False)),
            tls_mode=tls_mode,
            ignore_certificates=tls_verify == "never",
            tls_ca_certfile=settings.get("tls_ca_certfile"),
            timeout=float(settings.get("timeout", 15.0)),
            follow_referrals=bool(settings.get("follow_referrals", False)),
        )
