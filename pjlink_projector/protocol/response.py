# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

from ..internal_types import *
from ..exceptions import (
    PJLinkAuthenticationError,
    PJLinkEmptyResponseError,
    PJLinkResponseError,
  )
from ..constants import ENCODING, COMMAND_LENGTH
from .command_meta import SUCCESS_RESPONSE, error_code_map

AUTH_ERROR_CODE = "ERRA"
"""Appears anywhere in a reply line when the projector rejected the authentication digest."""

HEADER_LENGTH = 2 + COMMAND_LENGTH + 1
"""Length of the "%<class><command>=" prefix of a reply line."""

class PJLinkResponse:
    """A reply from a PJLink projector.

    A reply line has the form:

        %<class><command>=<value>[ <extra-token>...]\\r

    The value after "=" becomes the first of the response tokens; any further
    space-separated tokens follow it in order. Projector error codes (ERR1..ERR4)
    arrive as the value and are not parse errors.
    """
    _pjlink_class: str
    _command: str
    _tokens: Tuple[str, ...]

    def __init__(self, pjlink_class: str, command: str, tokens: Sequence[str]):
        self._pjlink_class = pjlink_class
        self._command = command
        self._tokens = tuple(tokens)

    @property
    def pjlink_class(self) -> str:
        """The PJLink class digit echoed by the projector"""
        return self._pjlink_class

    @property
    def command(self) -> str:
        """The 4-character command mnemonic echoed by the projector"""
        return self._command

    @property
    def tokens(self) -> Tuple[str, ...]:
        """The response value followed by any extra space-separated tokens"""
        return self._tokens

    @classmethod
    def parse(cls, line: Union[str, bytes]) -> Self:
        """Parses a reply line, with or without its trailing carriage return."""
        if isinstance(line, bytes):
            line = line.decode(ENCODING, errors='replace')
        if line.endswith('\r'):
            line = line[:-1]
        if AUTH_ERROR_CODE in line:
            raise PJLinkAuthenticationError("Incorrect password; projector replied with authentication error")
        if line == '':
            raise PJLinkEmptyResponseError("Empty reply; projector closed the connection without responding")
        raw_tokens = line.split(' ')
        header = raw_tokens[0]
        if len(header) < HEADER_LENGTH or header[0] != '%' or header[HEADER_LENGTH-1] != '=':
            raise PJLinkResponseError(f"Malformed reply from projector: {line!r}")
        return cls(
            pjlink_class=header[1:2],
            command=header[2:HEADER_LENGTH-1],
            tokens=[header[HEADER_LENGTH:]] + raw_tokens[1:],
          )

    @property
    def value(self) -> str:
        """The first response token; the value following "=" in the reply"""
        return self.tokens[0]

    @property
    def success(self) -> bool:
        """True iff the projector replied "OK" """
        return self.value == SUCCESS_RESPONSE

    def is_success(self) -> bool:
        return self.success

    @property
    def error_code(self) -> Optional[str]:
        """The PJLink error code (e.g., "ERR2") if the projector replied with one"""
        return self.value if self.value in error_code_map else None

    @property
    def error_description(self) -> Optional[str]:
        code = self.error_code
        return None if code is None else error_code_map[code]

    def to_jsonable(self) -> JsonableDict:
        return {
            "class": self.pjlink_class,
            "command": self.command,
            "response": list(self.tokens),
          }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PJLinkResponse):
            return NotImplemented
        return (
            self.pjlink_class == other.pjlink_class and
            self.command == other.command and
            self.tokens == other.tokens
          )

    def __str__(self) -> str:
        return f"PJLinkResponse(%{self.pjlink_class}{self.command}={' '.join(self.tokens)})"

    def __repr__(self) -> str:
        return str(self)
