# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink Projector client.

Provides one-connection-per-request access to a PJLink projector over TCP/IP.
"""

from .client_config import PJLinkClientConfig
from .tcp_client_transport import TcpPJLinkClientTransport, pjlink_exchange
from .client_impl import (
    PJLinkProjectorClient,
  )
