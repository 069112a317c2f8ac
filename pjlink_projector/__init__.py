# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package pjlink_projector provides a command-line tool and API for controlling
projectors and displays via the PJLink class 1 protocol over TCP/IP.
"""

from .version import __version__

from .pkg_logging import logger

from .internal_types import Jsonable, JsonableDict

from .exceptions import (
    PJLinkError,
    PJLinkValidationError,
    PJLinkInvalidCommandLengthError,
    PJLinkInvalidParameterLengthError,
    PJLinkEmptyParameterError,
    PJLinkInvalidParameterError,
    PJLinkInvalidClassError,
    PJLinkUnknownCommandError,
    PJLinkUnsupportedClassError,
    PJLinkConnectionError,
    PJLinkReadTimeoutError,
    PJLinkGreetingError,
    PJLinkAuthenticationError,
    PJLinkResponseError,
    PJLinkEmptyResponseError,
    PJLinkCommandRejectedError,
  )

from .constants import DEFAULT_PORT, CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT

from .client import (
    PJLinkProjectorClient,
    PJLinkClientConfig,
    TcpPJLinkClientTransport,
    pjlink_exchange,
  )

from .protocol import (
    PJLinkRequest,
    PJLinkResponse,
    PJLinkChallenge,
    CLASS1_COMMANDS,
    CLASS2_COMMANDS,
    is_valid_command,
    auth_digest,
    parse_greeting,
    parse_greeting_line,
    error_code_map,
    power_status_map,
  )
