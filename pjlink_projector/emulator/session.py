# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A single client connection to the PJLink projector emulator.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..constants import LINE_TERMINATOR

if TYPE_CHECKING:
    from .emulator_impl import PJLinkProjectorEmulator

class PJLinkProjectorEmulatorSession(asyncio.Protocol):
    emulator: PJLinkProjectorEmulator
    session_id: int = -1
    transport: Optional[asyncio.Transport] = None
    seed: str = ''
    peername: Any = None
    _recv_buffer: bytes

    def __init__(self, emulator: PJLinkProjectorEmulator):
        self.emulator = emulator
        self._recv_buffer = b''

    @property
    def auth_required(self) -> bool:
        return self.seed != ''

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        assert isinstance(transport, asyncio.Transport)
        self.transport = transport
        self.peername = transport.get_extra_info('peername')
        self.session_id = self.emulator.alloc_session_id(self)
        logger.debug(f"{self}: Connection made")
        self.seed = self.emulator.new_seed()
        greeting = self.emulator.greeting(self)
        if greeting is not None:
            self.write(greeting)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        logger.debug(f"{self}: Connection lost, exc={exc}")
        self.transport = None
        self.emulator.free_session_id(self.session_id)

    def data_received(self, data: bytes) -> None:
        self._recv_buffer += data
        while LINE_TERMINATOR in self._recv_buffer:
            line, self._recv_buffer = self._recv_buffer.split(LINE_TERMINATOR, 1)
            logger.debug(f"{self}: Received line: {line!r}")
            self.emulator.on_line_received(self, line)

    def write(self, data: bytes) -> None:
        if self.transport is not None:
            logger.debug(f"{self}: Sending: {data!r}")
            self.transport.write(data)

    def close(self) -> None:
        if self.transport is not None:
            self.transport.close()

    def __str__(self) -> str:
        return f"PJLinkProjectorEmulatorSession({self.session_id}, peer={self.peername})"

    def __repr__(self) -> str:
        return str(self)
