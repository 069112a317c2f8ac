# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Low-level protocol definitions for PJLink projectors.

Covers greeting/challenge parsing, MD5 challenge-response authentication,
command validation and encoding, and reply parsing. There is no I/O here.
"""

from .command_meta import (
    CLASS1_COMMANDS,
    CLASS2_COMMANDS,
    COMMANDS_BY_CLASS,
    QUERY_PARAMETER,
    SUCCESS_RESPONSE,
    is_valid_command,
    error_code_map,
    power_status_map,
    input_type_map,
    av_mute_map,
  )

from .command import (
    PJLinkRequest,
    auth_digest,
  )

from .response import (
    PJLinkResponse,
    AUTH_ERROR_CODE,
  )

from .handshake import (
    PJLINK_MARKER,
    AUTH_DISABLED,
    AUTH_ENABLED,
    PJLinkChallenge,
    parse_greeting,
    parse_greeting_line,
)
