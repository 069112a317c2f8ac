# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by pjlink_projector"""

DEFAULT_PORT = 4352
"""The listen port number used by PJLink devices for TCP/IP control."""

CONNECT_TIMEOUT = 10.0
"""The timeout for connecting to the projector over TCP/IP, in seconds."""

DEFAULT_READ_TIMEOUT = 10.0
"""The default timeout for reading the greeting or a reply line, in seconds.
   None disables the read deadline."""

COMMAND_LENGTH = 4
"""Every PJLink command mnemonic is exactly 4 ASCII characters."""

MAX_PARAMETER_LENGTH = 128
"""The maximum length of a command parameter, in bytes."""

LINE_TERMINATOR = b"\r"
"""Terminates every line in both directions. There is no length prefix."""

ENCODING = "utf-8"
"""Encoding used for lines on the wire."""
