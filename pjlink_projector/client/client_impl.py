# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink Projector client.

Provides named operations (power control, generic property get/set) on a
PJLink projector. Every operation opens its own connection, performs one
exchange, and closes it.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import PJLinkCommandRejectedError
from ..pkg_logging import logger
from ..protocol import (
    PJLinkRequest,
    PJLinkResponse,
    power_status_map,
    input_type_map,
  )

from .client_config import PJLinkClientConfig
from .tcp_client_transport import TcpPJLinkClientTransport

class PJLinkProjectorClient:
    """PJLink Projector TCP/IP client.

    The client holds only the endpoint configuration, so a single instance may
    be shared by concurrent tasks; each call produces an independent connection.
    """

    config: PJLinkClientConfig

    def __init__(
            self,
            host: Optional[str]=None,
            password: Optional[str]=None,
            *,
            port: Optional[int]=None,
            connect_timeout_secs: Optional[float]=None,
            read_timeout_secs: Optional[float]=None,
            strict_greeting: Optional[bool]=None,
            config: Optional[PJLinkClientConfig]=None,
          ):
        self.config = PJLinkClientConfig(
            host=host,
            password=password,
            port=port,
            connect_timeout_secs=connect_timeout_secs,
            read_timeout_secs=read_timeout_secs,
            strict_greeting=strict_greeting,
            base_config=config,
          )

    @property
    def host(self) -> Optional[str]:
        return self.config.host

    @property
    def port(self) -> int:
        return self.config.port

    async def send_request(self, request: PJLinkRequest) -> PJLinkResponse:
        """Sends a request over a new connection and returns the parsed response.

        Malformed requests are rejected before any connection is attempted.
        """
        request.validate()
        transport = TcpPJLinkClientTransport.from_config(self.config)
        async with transport:
            return await transport.exchange(request)

    async def transact_by_name(self, command: str, parameter: str) -> PJLinkResponse:
        """Sends a class 1 command and returns the response."""
        return await self.send_request(PJLinkRequest(1, command, parameter))

    async def get_power_status(self) -> PJLinkResponse:
        """Queries the power status.

        The friendly power status name is available with power_status_str().
        """
        return await self.send_request(PJLinkRequest.query("POWR"))

    async def power_status_str(self) -> str:
        """Returns the friendly power status name ("Standby", "On", "Cooling" or "Warming"),
           or the raw response value if it is not a known power state."""
        response = await self.get_power_status()
        return power_status_map.get(response.value, response.value)

    async def input_type_str(self) -> str:
        """Returns the type of the selected input ("RGB", "Video", "Digital", "Storage"
           or "Network"), or the raw INPT value if its type is not known."""
        value = await self.get_property("INPT")
        return input_type_map.get(value[:1], value)

    async def turn_on(self) -> PJLinkResponse:
        """Sends a power on command.

        Raises PJLinkCommandRejectedError if the projector does not reply "OK".
        """
        response = await self.send_request(PJLinkRequest.set("POWR", "1"))
        if not response.success:
            raise PJLinkCommandRejectedError(
                f"{self}: could not turn on projector: {self._describe_failure(response)}", response)
        return response

    async def turn_off(self) -> PJLinkResponse:
        """Sends a power off command.

        Raises PJLinkCommandRejectedError if the projector does not reply "OK".
        """
        response = await self.send_request(PJLinkRequest.set("POWR", "0"))
        if not response.success:
            raise PJLinkCommandRejectedError(
                f"{self}: could not turn off projector: {self._describe_failure(response)}", response)
        return response

    async def get_property(self, name: str) -> str:
        """Queries a class 1 property and returns the first response token."""
        response = await self.send_request(PJLinkRequest.query(name))
        return response.value

    async def get_property_array(self, name: str) -> List[str]:
        """Queries a class 1 property and returns all response tokens."""
        response = await self.send_request(PJLinkRequest.query(name))
        return list(response.tokens)

    async def set_property(self, name: str, value: str) -> None:
        """Sets a class 1 property. The response value is not examined."""
        response = await self.send_request(PJLinkRequest.set(name, value))
        logger.debug(f"{self}: set {name}={value} returned {response}")

    @staticmethod
    def _describe_failure(response: PJLinkResponse) -> str:
        description = response.error_description
        if description is None:
            return response.value
        return f"{response.value} ({description})"

    def __str__(self) -> str:
        return f"PJLinkProjectorClient({self.config.host}:{self.config.port})"

    def __repr__(self) -> str:
        return str(self)
