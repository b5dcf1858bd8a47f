"""
Claymore Miner API Client

This module provides a client for the remote-management API of the
Claymore dual miner: fetching status, restarting the miner process and
rebooting the rig.
"""

import logging
from typing import Optional

from .base import JsonRpcTransport
from .config_validation import ClientConfig
from .decoder import parse_status_reply
from .exceptions import ClaymoreError, TransportError
from .schemas import MinerEndpoint, MinerSnapshot
from .utils.constants import METHOD_GET_STATUS, METHOD_REBOOT, METHOD_RESTART

logger = logging.getLogger(__name__)


class ClaymoreClient:
    """
    Client for interacting with Claymore miners.

    The client keeps no per-rig state. Every operation takes the endpoint
    to talk to and opens its own connection, so one client can serve any
    number of rigs.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[JsonRpcTransport] = None
    ):
        """
        Initialize the Claymore client.

        Args:
            config: Client configuration; defaults are used if None
            transport: Transport to use; built from config if None
        """
        self.config = config or ClientConfig()
        self.transport = transport or JsonRpcTransport(
            timeout=self.config.timeout,
            default_port=self.config.default_port
        )

    def get_status(self, endpoint: MinerEndpoint) -> MinerSnapshot:
        """
        Get the current status of a miner.

        Args:
            endpoint: Rig to query

        Returns:
            Decoded status snapshot

        Raises:
            TransportError: If the call fails or the result is not a list
            MalformedReplyError: If the status reply is structurally invalid
        """
        result = self.transport.call(endpoint, METHOD_GET_STATUS)

        if not isinstance(result, list):
            logger.error(f"Unexpected status result from {endpoint.address}: {result!r}")
            raise TransportError(
                f"Expected a list result, got {type(result).__name__}",
                endpoint.address,
                "parse"
            )

        try:
            snapshot = parse_status_reply(result, version_suffix=self.config.version_suffix)
        except ClaymoreError as e:
            logger.error(f"Error decoding status from {endpoint.address}: {str(e)}")
            raise

        logger.info(
            f"{endpoint} reports {snapshot.gpu_count} GPUs, "
            f"hash rate {snapshot.primary_crypto.hash_rate}, uptime {snapshot.uptime_minutes} min"
        )
        return snapshot

    def restart(self, endpoint: MinerEndpoint) -> None:
        """
        Stop and start the miner process.

        Args:
            endpoint: Rig to restart

        Raises:
            TransportError: If the call fails
        """
        logger.info(f"Restarting miner at {endpoint.address}")
        self.transport.call(endpoint, METHOD_RESTART, expect_result=False)

    def reboot(self, endpoint: MinerEndpoint) -> None:
        """
        Reboot the rig.

        Args:
            endpoint: Rig to reboot

        Raises:
            TransportError: If the call fails
        """
        logger.info(f"Rebooting rig at {endpoint.address}")
        self.transport.call(endpoint, METHOD_REBOOT, expect_result=False)
