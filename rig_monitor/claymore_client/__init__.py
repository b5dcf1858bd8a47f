"""
Claymore Miner Remote-Management Client

This package provides a client for the Claymore dual miner's JSON-RPC
management port: it fetches and decodes miner status, and restarts or
reboots rigs.
"""

from .client import ClaymoreClient
from .config_validation import ClientConfig, ValidationError, load_client_config
from .decoder import parse_status_reply
from .exceptions import ClaymoreError, MalformedReplyError, TransportError
from .schemas import CryptoStats, GpuStats, MinerEndpoint, MinerSnapshot, PoolInfo

__all__ = [
    'ClaymoreClient',
    'ClientConfig',
    'ValidationError',
    'load_client_config',
    'parse_status_reply',
    'ClaymoreError',
    'MalformedReplyError',
    'TransportError',
    'CryptoStats',
    'GpuStats',
    'MinerEndpoint',
    'MinerSnapshot',
    'PoolInfo',
]
