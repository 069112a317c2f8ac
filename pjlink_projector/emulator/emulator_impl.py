# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink Projector emulator.

Provides a simple emulation of a PJLink class 1 projector on TCP/IP.
"""

from __future__ import annotations

import asyncio
import secrets

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import (
    CLASS1_COMMANDS,
    QUERY_PARAMETER,
    SUCCESS_RESPONSE,
    PJLINK_MARKER,
    AUTH_DISABLED,
    AUTH_ENABLED,
    AUTH_ERROR_CODE,
    auth_digest,
    av_mute_map,
  )
from ..constants import DEFAULT_PORT, COMMAND_LENGTH, ENCODING
from ..exceptions import PJLinkError

from .session import PJLinkProjectorEmulatorSession

DIGEST_LENGTH = 32
"""Length of the hex MD5 digest that prefixes authenticated commands."""

READ_ONLY_COMMANDS = ("INST", "ERST", "LAMP", "NAME", "INF1", "INF2", "INFO", "CLSS")
"""Class 1 commands that only accept the "?" query parameter."""

class PJLinkProjectorEmulator(AsyncContextManager['PJLinkProjectorEmulator']):
    password: Optional[str]
    fixed_seed: Optional[str]
    bind_addr: str
    port: int
    sessions: Dict[int, PJLinkProjectorEmulatorSession]
    next_session_id: int = 0
    requests: asyncio.Queue[Optional[Tuple[PJLinkProjectorEmulatorSession, bytes]]]
    server: Optional[asyncio.Server] = None
    handler_task: Optional[asyncio.Task[None]] = None
    final_result: asyncio.Future[None]

    properties: Dict[str, str]
    """Current value of each class 1 property, by command mnemonic."""

    replies: Dict[str, str]
    """Scripted response values by command mnemonic; these override normal handling."""

    received_lines: List[bytes]
    """Every command line received, without the terminating b'\\r'."""

    def __init__(
            self,
            password: Optional[str] = None,
            bind_addr: Optional[str] = None,
            port: int = DEFAULT_PORT,
            seed: Optional[str] = None,
            replies: Optional[Mapping[str, str]] = None,
          ):
        self.password = None if password == '' else password
        self.fixed_seed = seed
        self.bind_addr = '0.0.0.0' if bind_addr is None else bind_addr
        self.port = port
        self.sessions = {}
        self.requests = asyncio.Queue()
        self.final_result = asyncio.get_event_loop().create_future()
        self.properties = {
            "POWR": "0",
            "INPT": "31",
            "AVMT": "30",
            "INST": "11 21 31 32 51",
            "ERST": "000000",
            "LAMP": "1200 0",
            "NAME": "pjlink-emulator",
            "INF1": "PJLinkEmu",
            "INF2": "Emulator",
            "INFO": "Software 0.1",
            "CLSS": "1",
          }
        self.replies = {} if replies is None else dict(replies)
        self.received_lines = []

    @property
    def auth_enabled(self) -> bool:
        return self.password is not None

    def new_seed(self) -> str:
        """Returns the authentication seed for a new session, or '' if authentication is disabled."""
        if not self.auth_enabled:
            return ''
        if self.fixed_seed is not None:
            return self.fixed_seed
        return secrets.token_hex(4)

    def greeting(self, session: PJLinkProjectorEmulatorSession) -> Optional[bytes]:
        """Returns the greeting to send when a session connects, or None to send nothing."""
        if session.auth_required:
            return f"{PJLINK_MARKER} {AUTH_ENABLED} {session.seed}\r".encode(ENCODING)
        return f"{PJLINK_MARKER} {AUTH_DISABLED}\r".encode(ENCODING)

    def alloc_session_id(self, session: PJLinkProjectorEmulatorSession) -> int:
        result = self.next_session_id
        self.next_session_id += 1
        self.sessions[result] = session
        return result

    def free_session_id(self, session_id: int) -> None:
        self.sessions.pop(session_id, None)

    def on_line_received(self, session: PJLinkProjectorEmulatorSession, line: bytes) -> None:
        """Called when a complete command line is received from a session."""
        self.received_lines.append(line)
        self.requests.put_nowait((session, line))

    async def handle_command(
            self,
            session: PJLinkProjectorEmulatorSession,
            pjlink_class: str,
            command: str,
            parameter: str
          ) -> str:
        """Handle a single authenticated command, and return the response value."""
        if command in self.replies:
            return self.replies[command]

        if pjlink_class != '1' or not command in CLASS1_COMMANDS:
            return "ERR1"

        if parameter == QUERY_PARAMETER:
            return self.properties[command]

        if command in READ_ONLY_COMMANDS:
            return "ERR2"

        if command == "POWR":
            if not parameter in ("0", "1"):
                return "ERR2"
        elif command == "INPT":
            if not parameter in self.properties["INST"].split(' '):
                return "ERR2"
            if self.properties["POWR"] != "1":
                return "ERR3"
        elif command == "AVMT":
            if not parameter in av_mute_map:
                return "ERR2"

        logger.debug(f"{session}: Setting {command} to {parameter!r}")
        self.properties[command] = parameter
        return SUCCESS_RESPONSE

    async def handle_request_line(
            self,
            session: PJLinkProjectorEmulatorSession,
            line: bytes
          ) -> Optional[bytes]:
        """Handle a single command line, and return the reply line, or None to hang up."""
        text = line.decode(ENCODING, errors='replace')
        if session.auth_required:
            digest, text = text[:DIGEST_LENGTH], text[DIGEST_LENGTH:]
            assert self.password is not None
            if digest != auth_digest(session.seed, self.password):
                logger.debug(f"{session}: Authentication failed")
                return f"{PJLINK_MARKER} {AUTH_ERROR_CODE}\r".encode(ENCODING)

        header_length = 2 + COMMAND_LENGTH
        if len(text) < header_length + 2 or text[0] != '%' or text[header_length] != ' ':
            raise PJLinkError(f"Malformed command line: {line!r}")
        pjlink_class = text[1]
        command = text[2:header_length]
        parameter = text[header_length+1:]
        value = await self.handle_command(session, pjlink_class, command, parameter)
        return f"%{pjlink_class}{command}={value}\r".encode(ENCODING)

    async def handle_requests(self) -> None:
        """Handle requests from sessions."""
        while True:
            session_and_line = await self.requests.get()
            try:
                if session_and_line is None:
                    logger.debug("Emulator handler: Received EOF; exiting")
                    break
                session, line = session_and_line
                try:
                    reply = await self.handle_request_line(session, line)
                    if reply is None:
                        session.close()
                    else:
                        session.write(reply)
                except asyncio.CancelledError:
                    logger.debug(f"{session}: Handler task cancelled; exiting")
                    break
                except Exception as e:
                    logger.exception(f"{session}: Handler task: Exception while handling request; killing session: {e}")
                    session.close()
            finally:
                self.requests.task_done()

    async def finish_start(self) -> None:
        """Called after the socket is up and running.  Subclasses can override to do additional
           initialization."""
        pass

    async def run(self) -> None:
        """Runs the Emulator until it is closed."""
        async with self:
            await self.wait_closed()

    async def start(self) -> None:
        try:
            loop = asyncio.get_running_loop()
            self.handler_task = asyncio.create_task(self.handle_requests())
            self.server = await loop.create_server(
                lambda: PJLinkProjectorEmulatorSession(self),
                host=self.bind_addr,
                port=self.port)
            # port 0 binds an ephemeral port; report the real one
            self.port = self.server.sockets[0].getsockname()[1]
            logger.debug(f"Emulator: Listening on {self.bind_addr}:{self.port}")
            await self.server.start_serving()
            await self.finish_start()
        except BaseException as e:
            self.set_final_result(e)
            try:
                await self.wait_closed()
            except BaseException:
                pass
            raise

    def close(self, exc: Optional[BaseException]=None) -> None:
        """Stops the Emulator."""
        self.set_final_result(exc)

    async def wait_closed(self) -> None:
        """Waits for the emulator to be fully closed. Does not initiate shutdown."""
        try:
            await self.final_result
        finally:
            try:
                for session in list(self.sessions.values()):
                    session.close()
                if self.server is not None:
                    try:
                        self.server.close()
                    finally:
                        await self.server.wait_closed()
            finally:
                self.server = None
                if self.handler_task is not None:
                    try:
                        await self.handler_task
                    finally:
                        self.handler_task = None

    def set_final_result(self, exc: Optional[BaseException]=None) -> None:
        if not self.final_result.done():
            if exc is None:
                logger.debug(f"Emulator: Setting final result to success")
                self.final_result.set_result(None)
            else:
                logger.debug(f"Emulator: Setting final exception: {exc}")
                self.final_result.set_exception(exc)
            self.requests.put_nowait(None)
            if self.server is not None:
                self.server.close()

    async def __aenter__(self) -> PJLinkProjectorEmulator:
        await self.start()
        return self

    async def __aexit__(self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> None:
        self.set_final_result(exc)
        try:
            # ensure that final_result has been awaited
            await self.wait_closed()
        except Exception:
            pass

    def __str__(self) -> str:
        return f"PJLinkProjectorEmulator({self.bind_addr}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
