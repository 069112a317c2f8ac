#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .protocol.response import PJLinkResponse

class PJLinkError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class PJLinkValidationError(PJLinkError):
  """A request is malformed and was not sent to the projector."""
  pass

class PJLinkInvalidCommandLengthError(PJLinkValidationError):
  """The command mnemonic is not exactly 4 characters."""
  pass

class PJLinkInvalidParameterLengthError(PJLinkValidationError):
  """The command parameter is longer than 128 bytes."""
  pass

class PJLinkEmptyParameterError(PJLinkValidationError):
  """The command parameter is empty."""
  pass

class PJLinkInvalidParameterError(PJLinkValidationError):
  """The command parameter contains the line terminator."""
  pass

class PJLinkInvalidClassError(PJLinkValidationError):
  """The PJLink class is neither 1 nor 2."""
  pass

class PJLinkUnknownCommandError(PJLinkValidationError):
  """The command mnemonic is not in the catalog for its class."""
  pass

class PJLinkUnsupportedClassError(PJLinkValidationError):
  """The command is a recognized class 2 command; class 2 is not implemented."""
  pass

class PJLinkConnectionError(PJLinkError):
  """The TCP/IP connection to the projector could not be established or was lost."""
  pass

class PJLinkReadTimeoutError(PJLinkConnectionError):
  """The projector did not send a complete line within the read deadline."""
  pass

class PJLinkGreetingError(PJLinkError):
  """The projector's greeting was not recognized (strict greeting mode only)."""
  pass

class PJLinkAuthenticationError(PJLinkError):
  """The projector rejected the authentication digest (ERRA)."""
  pass

class PJLinkResponseError(PJLinkError):
  """The projector's reply could not be parsed."""
  pass

class PJLinkEmptyResponseError(PJLinkResponseError):
  """The projector closed the connection without sending a reply."""
  pass

class PJLinkCommandRejectedError(PJLinkError):
  """The projector answered a command with something other than OK."""
  response: Optional[PJLinkResponse]

  def __init__(self, msg: str, response: Optional[PJLinkResponse]=None):
    super().__init__(msg)
    self.response = response
