# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink Projector TCP/IP client transport.

Provides a one-shot session with a PJLink projector: connect, read the greeting,
send one (optionally authenticated) command, read one reply, and close. PJLink
devices expect exactly this pattern; no connection is ever reused.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..exceptions import (
    PJLinkConnectionError,
    PJLinkReadTimeoutError,
    PJLinkResponseError,
  )
from ..constants import (
    DEFAULT_PORT,
    CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    LINE_TERMINATOR,
  )
from ..pkg_logging import logger
from ..protocol import (
    PJLinkRequest,
    PJLinkResponse,
    PJLinkChallenge,
    parse_greeting_line,
  )

from .client_config import PJLinkClientConfig

class TcpPJLinkClientTransport:
    """PJLink Projector TCP/IP client transport for a single request/response exchange."""

    reader: Optional[asyncio.StreamReader] = None
    writer: Optional[asyncio.StreamWriter] = None
    host: str
    port: int
    password: str
    connect_timeout_secs: float
    read_timeout_secs: Optional[float]
    strict_greeting: bool
    challenge: Optional[PJLinkChallenge] = None
    closed: bool = False

    def __init__(
            self,
            host: str,
            password: Optional[str]=None,
            port: int=DEFAULT_PORT,
            connect_timeout_secs: float=CONNECT_TIMEOUT,
            read_timeout_secs: Optional[float]=DEFAULT_READ_TIMEOUT,
            strict_greeting: bool=False,
          ) -> None:
        self.host = host
        self.port = port
        self.password = '' if password is None else password
        self.connect_timeout_secs = connect_timeout_secs
        self.read_timeout_secs = read_timeout_secs
        self.strict_greeting = strict_greeting

    @classmethod
    def from_config(cls, config: PJLinkClientConfig) -> Self:
        if config.host is None:
            raise PJLinkConnectionError("No projector host configured (set PJLINK_PROJECTOR_HOST)")
        return cls(
            config.host,
            password=config.password,
            port=config.port,
            connect_timeout_secs=config.connect_timeout_secs,
            read_timeout_secs=config.read_timeout_secs,
            strict_greeting=config.strict_greeting,
          )

    async def connect(self) -> None:
        """Opens the TCP/IP connection to the projector, with the connect timeout."""
        assert self.reader is None and self.writer is None
        logger.debug(f"Connecting to projector at {self.host}:{self.port}")
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port),
                self.connect_timeout_secs
              )
        except asyncio.TimeoutError as e:
            raise PJLinkConnectionError(
                f"Failed to establish a connection with PJLink device at {self.host}:{self.port}: "
                f"timed out after {self.connect_timeout_secs} seconds") from e
        except OSError as e:
            raise PJLinkConnectionError(
                f"Failed to establish a connection with PJLink device at {self.host}:{self.port}: {e}") from e

    async def read_line(self) -> bytes:
        """Reads a single line up to and including b'\\r', with the read timeout.

        If the projector closes the connection first, whatever was received
        (possibly nothing) is returned.
        """
        assert self.reader is not None
        try:
            if self.read_timeout_secs is None:
                data = await self.reader.readuntil(LINE_TERMINATOR)
            else:
                data = await asyncio.wait_for(
                    self.reader.readuntil(LINE_TERMINATOR), self.read_timeout_secs)
        except asyncio.IncompleteReadError as e:
            data = e.partial
            logger.debug(f"Connection closed by projector after {len(data)} bytes")
        except asyncio.LimitOverrunError as e:
            raise PJLinkResponseError(f"Line from projector at {self.host}:{self.port} is too long") from e
        except asyncio.TimeoutError as e:
            raise PJLinkReadTimeoutError(
                f"Timed out after {self.read_timeout_secs} seconds waiting for a line "
                f"from PJLink device at {self.host}:{self.port}") from e
        except OSError as e:
            raise PJLinkConnectionError(
                f"Connection to PJLink device at {self.host}:{self.port} failed: {e}") from e
        logger.debug(f"Read line: {data!r}")
        return data

    async def write_exactly(self, data: bytes) -> None:
        """Writes data to the projector in a single send."""
        assert self.writer is not None
        try:
            self.writer.write(data)
            if self.read_timeout_secs is None:
                await self.writer.drain()
            else:
                await asyncio.wait_for(self.writer.drain(), self.read_timeout_secs)
        except asyncio.TimeoutError as e:
            raise PJLinkReadTimeoutError(
                f"Timed out writing to PJLink device at {self.host}:{self.port}") from e
        except OSError as e:
            raise PJLinkConnectionError(
                f"Connection to PJLink device at {self.host}:{self.port} failed: {e}") from e

    async def read_challenge(self) -> PJLinkChallenge:
        greeting = await self.read_line()
        challenge = parse_greeting_line(greeting, strict=self.strict_greeting)
        logger.debug(f"Handshake: Received greeting: {challenge}")
        self.challenge = challenge
        return challenge

    async def exchange(self, request: PJLinkRequest) -> PJLinkResponse:
        """Performs the complete exchange for one request on this connection.

        Reads the greeting, sends the encoded request (with an authentication
        digest if the projector asked for one and a password is configured),
        reads the reply and parses it. The transport must be connected.
        """
        challenge = await self.read_challenge()
        if challenge.auth_required and self.password == '':
            logger.debug("Handshake: Projector requires authentication but no password is configured")
        data = request.encode(challenge.seed, self.password)
        if challenge.auth_required and self.password != '':
            logger.debug(f"Writing authenticated command: <digest>{data[32:]!r}")
        else:
            logger.debug(f"Writing command: {data!r}")
        await self.write_exactly(data)
        reply = await self.read_line()
        response = PJLinkResponse.parse(reply)
        logger.debug(f"Received response: {response}")
        return response

    async def aclose(self) -> None:
        """Closes the connection and waits for it to finish closing. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        writer = self.writer
        if writer is not None:
            try:
                writer.close()
                await writer.wait_closed()
            except Exception:
                logger.debug("Exception while closing connection to projector", exc_info=True)

    async def __aenter__(self) -> TcpPJLinkClientTransport:
        """Connects, and enters a context that will close the connection on exit."""
        await self.connect()
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        await self.aclose()

    def __str__(self) -> str:
        return f"TcpPJLinkClientTransport({self.host}:{self.port})"

    def __repr__(self) -> str:
        return str(self)

async def pjlink_exchange(
        host: str,
        request: PJLinkRequest,
        password: Optional[str]=None,
        port: int=DEFAULT_PORT,
        connect_timeout_secs: float=CONNECT_TIMEOUT,
        read_timeout_secs: Optional[float]=DEFAULT_READ_TIMEOUT,
        strict_greeting: bool=False,
      ) -> PJLinkResponse:
    """Connects to a projector, sends one request, and returns the parsed reply.

    The request is validated before any connection is opened. The connection is
    closed on every exit path.
    """
    request.validate()
    transport = TcpPJLinkClientTransport(
        host,
        password=password,
        port=port,
        connect_timeout_secs=connect_timeout_secs,
        read_timeout_secs=read_timeout_secs,
        strict_greeting=strict_greeting,
      )
    async with transport:
        return await transport.exchange(request)
