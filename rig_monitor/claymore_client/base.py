"""
JSON-RPC transport for the Claymore remote-management API.

This module provides the connection handling shared by every remote call:
- Building the request envelope
- One TCP connection per call, closed on return
- Error mapping to TransportError
- Reply envelope validation
"""

import json
import logging
import socket
import time
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from .exceptions import TransportError
from .schemas import MinerEndpoint, RequestEnvelope, RpcResponse
from .utils.constants import DEFAULT_PORT, DEFAULT_TIMEOUT, MAX_REPLY_SIZE, RECV_CHUNK_SIZE

logger = logging.getLogger(__name__)


class JsonRpcTransport:
    """
    Line-delimited JSON-RPC over TCP.

    Holds no connection state: every call opens a socket, writes one
    request line, reads one reply line and closes the socket.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, default_port: int = DEFAULT_PORT):
        """
        Initialize the transport.

        Args:
            timeout: Connect and read timeout in seconds
            default_port: Port used when the endpoint address has none
        """
        self.timeout = timeout
        self.default_port = default_port

    def call(
        self,
        endpoint: MinerEndpoint,
        method: str,
        params: Dict[str, Any] = None,
        expect_result: bool = True
    ) -> Any:
        """
        Perform one remote call.

        Args:
            endpoint: Rig to call
            method: Remote method name
            params: Method-specific fields merged into the request
            expect_result: Whether the method answers with a result

        Returns:
            The reply's result, or None when no result is expected and the
            daemon closed the connection without answering

        Raises:
            TransportError: On connection failure, timeout, or a bad reply
        """
        payload = RequestEnvelope.for_endpoint(endpoint).to_payload(method, params)
        request = (json.dumps(payload, separators=(",", ":")) + "\n").encode("utf-8")
        host = endpoint.host
        port = endpoint.port or self.default_port

        logger.debug(f"Calling {method} on {host}:{port}")

        try:
            with socket.create_connection((host, port), timeout=self.timeout) as sock:
                sock.sendall(request)
                raw = self._read_line(sock, endpoint.address)
        except socket.timeout as e:
            logger.error(f"Timeout calling {method} on {endpoint.address}: {str(e)}")
            raise TransportError(f"Timed out calling {method}", endpoint.address, "timeout") from e
        except OSError as e:
            logger.error(f"Connection error calling {method} on {endpoint.address}: {str(e)}")
            raise TransportError(f"Connection failed: {str(e)}", endpoint.address, "connection") from e

        return self._decode_reply(raw, endpoint, method, expect_result)

    def _read_line(self, sock: socket.socket, address: str) -> bytes:
        """
        Read up to the first newline or until the peer closes.

        The whole read must finish within the timeout and stay under
        MAX_REPLY_SIZE bytes.
        """
        deadline = time.monotonic() + self.timeout
        buffer = bytearray()
        while True:
            chunk = sock.recv(RECV_CHUNK_SIZE)
            if not chunk:
                break
            newline = chunk.find(b"\n")
            if newline >= 0:
                buffer += chunk[:newline]
                break
            buffer += chunk
            if len(buffer) > MAX_REPLY_SIZE:
                logger.error(f"Reply from {address} exceeds {MAX_REPLY_SIZE} bytes")
                raise TransportError(f"Reply exceeds {MAX_REPLY_SIZE} bytes", address, "parse")
            if time.monotonic() > deadline:
                raise socket.timeout("reply not complete before deadline")
        return bytes(buffer)

    def _decode_reply(
        self,
        raw: bytes,
        endpoint: MinerEndpoint,
        method: str,
        expect_result: bool
    ) -> Optional[Any]:
        """Validate the reply envelope and return its result."""
        text = raw.decode("utf-8", errors="replace").strip()

        if not text:
            if expect_result:
                logger.error(f"Empty reply to {method} from {endpoint.address}")
                raise TransportError(f"Empty reply to {method}", endpoint.address, "parse")
            return None

        try:
            reply = RpcResponse.model_validate(json.loads(text))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.error(f"Invalid reply to {method} from {endpoint.address}: {str(e)}")
            raise TransportError(f"Invalid reply envelope: {str(e)}", endpoint.address, "parse") from e

        if reply.error:
            logger.error(f"{method} on {endpoint.address} returned error: {reply.error}")
            raise TransportError(f"Remote error: {reply.error}", endpoint.address, "rpc")

        if expect_result and not reply.has_result:
            raise TransportError(f"Reply to {method} has no result", endpoint.address, "parse")

        return reply.result
