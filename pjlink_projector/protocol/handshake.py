# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

from ..internal_types import *
from ..exceptions import PJLinkGreetingError
from ..constants import ENCODING

# Initial connection handshake:
#   Projector: "PJLINK 0\r" if authentication is disabled, or
#              "PJLINK 1 <seed>\r" if authentication is enabled
#   Client:    "%1POWR ?\r", or "<md5hex(seed+password)>%1POWR ?\r" if authenticating
#   Projector: "%1POWR=0\r", or "PJLINK ERRA\r" if the digest is wrong
#   <Connection is closed>

PJLINK_MARKER = "PJLINK"
"""First token of the greeting sent by the projector immediately on connecting."""

AUTH_DISABLED = "0"
"""Second greeting token when the projector does not require authentication."""

AUTH_ENABLED = "1"
"""Second greeting token when the projector requires authentication. The seed follows."""

class PJLinkChallenge:
    """The authentication challenge carried by a projector greeting.

    An empty seed means that no authentication is required.
    """
    seed: str

    def __init__(self, seed: str=''):
        self.seed = seed

    @property
    def auth_required(self) -> bool:
        return self.seed != ''

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PJLinkChallenge):
            return NotImplemented
        return self.seed == other.seed

    def __str__(self) -> str:
        return f"PJLinkChallenge(auth_required={self.auth_required})"

    def __repr__(self) -> str:
        return str(self)

def parse_greeting(tokens: Sequence[str], strict: bool=False) -> PJLinkChallenge:
    """Determines from the tokens of a greeting whether authentication is required.

    By default, any greeting that is not a recognizable "PJLINK 1 <seed>" is
    treated as not requiring authentication. If strict is True, anything other
    than "PJLINK 0" or "PJLINK 1 <seed>" raises PJLinkGreetingError.
    """
    if len(tokens) >= 2 and tokens[0] == PJLINK_MARKER:
        if tokens[1] == AUTH_DISABLED:
            return PJLinkChallenge()
        if tokens[1] == AUTH_ENABLED and len(tokens) >= 3 and tokens[2] != '':
            return PJLinkChallenge(tokens[2])
    if strict:
        raise PJLinkGreetingError(f"Unrecognized PJLink greeting: {' '.join(tokens)!r}")
    return PJLinkChallenge()

def parse_greeting_line(line: Union[str, bytes], strict: bool=False) -> PJLinkChallenge:
    """Parses a greeting line, with or without its trailing carriage return."""
    if isinstance(line, bytes):
        line = line.decode(ENCODING, errors='replace')
    if line.endswith('\r'):
        line = line[:-1]
    return parse_greeting(line.split(' '), strict=strict)
