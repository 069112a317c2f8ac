# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink Projector client configuration.

Provides the endpoint identity (host, port, password) and timeouts used
for every connection a PJLinkProjectorClient makes.
"""

from __future__ import annotations

import os

from ..internal_types import *
from ..exceptions import PJLinkError
from ..constants import (
    DEFAULT_PORT,
    CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
  )

def _env_float(name: str) -> Optional[float]:
    value = os.environ.get(name)
    if value is None or value == '':
        return None
    try:
        return float(value)
    except ValueError as e:
        raise PJLinkError(f"Invalid value for environment variable {name}: {value!r}") from e

def split_host_port(host: str) -> Tuple[str, Optional[str]]:
    """Splits a host specifier into (host, port string or None).

    Accepts "host", "host:port", "[ipv6-addr]" and "[ipv6-addr]:port". A bare
    IPv6 literal (more than one ':') is returned whole with no port.
    """
    if host.startswith('['):
        end = host.find(']')
        if end < 0:
            raise PJLinkError(f"Unterminated '[' in host specifier: {host!r}")
        rest = host[end+1:]
        if rest == '':
            return (host[1:end], None)
        if not rest.startswith(':'):
            raise PJLinkError(f"Invalid host specifier: {host!r}")
        return (host[1:end], rest[1:])
    if host.count(':') == 1:
        host_part, port_str = host.split(':', 1)
        return (host_part, port_str)
    return (host, None)

class PJLinkClientConfig:
    """PJLink Projector client configuration."""
    host: Optional[str]
    port: int
    password: str
    connect_timeout_secs: float
    read_timeout_secs: Optional[float]
    strict_greeting: bool

    def __init__(
            self,
            host: Optional[str]=None,
            password: Optional[str]=None,
            *,
            port: Optional[int]=None,
            connect_timeout_secs: Optional[float]=None,
            read_timeout_secs: Optional[float]=None,
            no_read_timeout: bool=False,
            strict_greeting: Optional[bool]=None,
            base_config: Optional[PJLinkClientConfig]=None
          ) -> None:
        """Creates a configuration for a PJLink Projector client.

           Args:
             host: The hostname or IPV4 address of the projector.
                   May be suffixed with ":<port>" to specify a
                   non-default port, which will override the port argument.
                   IPv6 addresses with a port must be bracketed, e.g. "[::1]:4352".
                   If None, the host will be taken from the
                     PJLINK_PROJECTOR_HOST environment variable.
             password:
                   The projector password. If None, the password
                   will be taken from the PJLINK_PROJECTOR_PASSWORD
                   environment variable. If an empty string or the
                   environment variable is not found, no password
                   will be used.
             port: The TCP/IP port number to use. If None, the port will be
                   taken from PJLINK_PROJECTOR_PORT. If that environment
                   variable is not found, the PJLink port (4352) is used.
             connect_timeout_secs:
                   The timeout for establishing a TCP/IP connection, in seconds.
                   If None, PJLINK_PROJECTOR_TIMEOUT is used, or CONNECT_TIMEOUT
                   (10 seconds) if that is not set.
             read_timeout_secs:
                   The timeout for reading the greeting and the reply, in seconds.
                   If None, PJLINK_PROJECTOR_READ_TIMEOUT is used, or
                   DEFAULT_READ_TIMEOUT if that is not set.
             no_read_timeout:
                   If True, reads wait indefinitely for the projector.
             strict_greeting:
                   If True, an unrecognized greeting is an error rather than
                   being treated as "no authentication". Default False.
             base_config:
                   An optional base configuration to use.
        """
        if base_config is None:
            self.init_from_defaults()
        else:
            self.init_from_base_config(base_config)

        if port is not None and port > 0:
            self.port = port

        if host is not None and host != '':
            self.host = host

        if self.host is not None:
            host_part, port_str = split_host_port(self.host)
            if port_str is not None:
                try:
                    self.port = int(port_str)
                except ValueError as e:
                    raise PJLinkError(f"Invalid port in host specifier: {self.host!r}") from e
            self.host = host_part

        if password is not None:
            self.password = password

        if connect_timeout_secs is not None:
            self.connect_timeout_secs = connect_timeout_secs

        if read_timeout_secs is not None:
            self.read_timeout_secs = read_timeout_secs

        if no_read_timeout:
            self.read_timeout_secs = None

        if strict_greeting is not None:
            self.strict_greeting = strict_greeting

    def init_from_defaults(self) -> None:
        """Initializes the configuration from environment variables and defaults."""
        host: Optional[str] = os.environ.get('PJLINK_PROJECTOR_HOST')
        if host == '':
            host = None
        self.host = host
        port_str = os.environ.get('PJLINK_PROJECTOR_PORT')
        if port_str is None or port_str == '':
            self.port = DEFAULT_PORT
        else:
            try:
                self.port = int(port_str)
            except ValueError as e:
                raise PJLinkError(f"Invalid value for environment variable PJLINK_PROJECTOR_PORT: {port_str!r}") from e
        password = os.environ.get('PJLINK_PROJECTOR_PASSWORD')
        if password is None:
            password = ''
        self.password = password
        connect_timeout_secs = _env_float('PJLINK_PROJECTOR_TIMEOUT')
        self.connect_timeout_secs = CONNECT_TIMEOUT if connect_timeout_secs is None else connect_timeout_secs
        read_timeout_secs = _env_float('PJLINK_PROJECTOR_READ_TIMEOUT')
        self.read_timeout_secs = DEFAULT_READ_TIMEOUT if read_timeout_secs is None else read_timeout_secs
        self.strict_greeting = False

    def init_from_base_config(self, base_config: PJLinkClientConfig) -> None:
        """Initializes the configuration from a base configuration."""
        self.host = base_config.host
        self.port = base_config.port
        self.password = base_config.password
        self.connect_timeout_secs = base_config.connect_timeout_secs
        self.read_timeout_secs = base_config.read_timeout_secs
        self.strict_greeting = base_config.strict_greeting

    def __str__(self) -> str:
        return (
            f"PJLinkClientConfig("
            f"host={self.host}, "
            f"port={self.port}, "
            f"connect_timeout_secs={self.connect_timeout_secs!r}, "
            f"read_timeout_secs={self.read_timeout_secs!r})"
          )

    def __repr__(self) -> str:
        return str(self)
