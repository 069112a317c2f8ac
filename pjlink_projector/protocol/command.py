# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import hashlib

from ..internal_types import *
from ..exceptions import (
    PJLinkValidationError,
    PJLinkInvalidCommandLengthError,
    PJLinkInvalidParameterLengthError,
    PJLinkEmptyParameterError,
    PJLinkInvalidParameterError,
    PJLinkInvalidClassError,
    PJLinkUnknownCommandError,
    PJLinkUnsupportedClassError,
  )
from ..constants import COMMAND_LENGTH, MAX_PARAMETER_LENGTH, ENCODING
from .command_meta import COMMANDS_BY_CLASS, QUERY_PARAMETER

def auth_digest(seed: str, password: str) -> str:
    """Returns the lowercase hex MD5 digest of seed + password, which is
       prepended to every command on an authenticated connection."""
    return hashlib.md5((seed + password).encode(ENCODING)).hexdigest()

class PJLinkRequest:
    """A command to a PJLink projector.

    The wire form of a request is:

        [<md5hex>]%<class><command> <parameter>\\r

    where the digest prefix is present only when the projector has sent an
    authentication seed and a password is configured.
    """
    _pjlink_class: int
    _command: str
    _parameter: str

    def __init__(self, pjlink_class: int, command: str, parameter: str):
        self._pjlink_class = pjlink_class
        self._command = command
        self._parameter = parameter

    @property
    def pjlink_class(self) -> int:
        """The PJLink class of the command (1 or 2)"""
        return self._pjlink_class

    @property
    def command(self) -> str:
        """The 4-character command mnemonic"""
        return self._command

    @property
    def parameter(self) -> str:
        """The command parameter; "?" for queries"""
        return self._parameter

    @property
    def is_query(self) -> bool:
        return self._parameter == QUERY_PARAMETER

    def validate(self) -> None:
        """Raises a PJLinkValidationError subclass if the request may not be sent."""
        if len(self._command) != COMMAND_LENGTH:
            raise PJLinkInvalidCommandLengthError(
                f"Command {self._command!r} does not have a length of {COMMAND_LENGTH} characters")
        parameter_length = len(self._parameter.encode(ENCODING))
        if parameter_length > MAX_PARAMETER_LENGTH:
            raise PJLinkInvalidParameterLengthError(
                f"Parameter length {parameter_length} exceeds maximum of {MAX_PARAMETER_LENGTH} bytes")
        if parameter_length == 0:
            raise PJLinkEmptyParameterError(f"Parameter for command {self._command} is empty")
        if '\r' in self._parameter:
            raise PJLinkInvalidParameterError(
                f"Parameter for command {self._command} contains a carriage return: {self._parameter!r}")
        commands = COMMANDS_BY_CLASS.get(self._pjlink_class)
        if commands is None:
            raise PJLinkInvalidClassError(
                f"Invalid PJLink class {self._pjlink_class!r}; must be either 1 or 2")
        if not self._command in commands:
            raise PJLinkUnknownCommandError(
                f"{self._command!r} is not a valid PJLink class {self._pjlink_class} command")
        if self._pjlink_class == 2:
            raise PJLinkUnsupportedClassError(
                f"PJLink class 2 command {self._command} is not implemented")

    @property
    def is_valid(self) -> bool:
        try:
            self.validate()
        except PJLinkValidationError:
            return False
        return True

    def encode(self, seed: str='', password: str='') -> bytes:
        """Validates the request and returns its wire form.

        If either seed or password is empty, no authentication digest is prepended.
        """
        self.validate()
        data = f"%{self._pjlink_class}{self._command} {self._parameter}\r"
        if seed != '' and password != '':
            data = auth_digest(seed, password) + data
        return data.encode(ENCODING)

    @classmethod
    def query(cls, command: str, pjlink_class: int=1) -> Self:
        """Creates a request that queries the current value of a property"""
        return cls(pjlink_class, command, QUERY_PARAMETER)

    @classmethod
    def set(cls, command: str, value: str, pjlink_class: int=1) -> Self:
        """Creates a request that sets a property to a value"""
        return cls(pjlink_class, command, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PJLinkRequest):
            return NotImplemented
        return (
            self._pjlink_class == other._pjlink_class and
            self._command == other._command and
            self._parameter == other._parameter
          )

    def __hash__(self) -> int:
        return hash((self._pjlink_class, self._command, self._parameter))

    def __str__(self) -> str:
        return f"PJLinkRequest(%{self._pjlink_class}{self._command} {self._parameter})"

    def __repr__(self) -> str:
        return str(self)
