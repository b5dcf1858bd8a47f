"""
Constants shared across the Claymore remote-management client.
"""

# Remote method names (fixed by the miner daemon)
METHOD_GET_STATUS = "miner_getstat1"
METHOD_RESTART = "miner_restart"
METHOD_REBOOT = "miner_reboot"

# Envelope values sent with every request
REQUEST_ID = "0"
JSONRPC_VERSION = "2.0"

# Transport defaults
DEFAULT_PORT = 3333
DEFAULT_TIMEOUT = 10.0
RECV_CHUNK_SIZE = 4096
MAX_REPLY_SIZE = 64 * 1024

# Status reply layout
STATUS_FIELD_COUNT = 9
FIELD_SEPARATOR = ";"
VERSION_SUFFIX = " - ETH"
