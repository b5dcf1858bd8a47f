"""
Exceptions raised by the Claymore client.
"""


class ClaymoreError(Exception):
    """Base class for errors raised while talking to a Claymore miner."""
    pass


class TransportError(ClaymoreError):
    """
    Connection failure, timeout, or a reply that does not fit the RPC envelope.

    Attributes:
        message: Human-readable description
        address: Endpoint address the call was made to
        error_type: One of "timeout", "connection", "parse", "rpc"
    """

    def __init__(self, message: str, address: str = "", error_type: str = "unknown"):
        self.message = message
        self.address = address
        self.error_type = error_type
        super().__init__(f"[{error_type}] {message} (address={address})")


class MalformedReplyError(ClaymoreError):
    """The status reply does not have the structure of the nine-field layout."""
    pass
