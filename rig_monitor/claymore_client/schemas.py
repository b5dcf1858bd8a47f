"""
Data schemas for the Claymore remote-management API.

This module defines Pydantic models for the decoded status snapshot, the
endpoint identifying a rig, and the JSON-RPC request and reply envelopes.
All models are frozen: a snapshot is built once by the decoder and handed
to the caller as an immutable value.
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils.constants import JSONRPC_VERSION, REQUEST_ID


class CryptoStats(BaseModel):
    """Hash rate and share counters for one mined currency."""
    model_config = ConfigDict(frozen=True)

    hash_rate: int = 0
    shares: int = 0
    rejected_shares: int = 0
    invalid_shares: int = 0


class PoolInfo(BaseModel):
    """Pool the miner is connected to."""
    model_config = ConfigDict(frozen=True)

    address: str = ""
    switches: int = 0


class GpuStats(BaseModel):
    """Telemetry for a single GPU."""
    model_config = ConfigDict(frozen=True)

    primary_hash_rate: int = 0
    secondary_hash_rate: int = 0
    temperature_c: int = 0
    fan_speed_pct: int = 0


class MinerSnapshot(BaseModel):
    """
    Decoded reply of the status method.

    The secondary currency and pool are always present; when the rig is not
    dual mining they hold zero values and an empty pool address.
    """
    model_config = ConfigDict(frozen=True)

    version: str = ""
    uptime_minutes: int = 0
    primary_crypto: CryptoStats = Field(default_factory=CryptoStats)
    secondary_crypto: CryptoStats = Field(default_factory=CryptoStats)
    primary_pool: PoolInfo = Field(default_factory=PoolInfo)
    secondary_pool: PoolInfo = Field(default_factory=PoolInfo)
    gpus: Tuple[GpuStats, ...] = ()

    @property
    def dual_mining(self) -> bool:
        """True when a secondary pool is configured."""
        return self.secondary_pool.address != ""

    @property
    def gpu_count(self) -> int:
        return len(self.gpus)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the snapshot to plain Python types.

        Returns:
            Dict suitable for json.dump
        """
        data = self.model_dump()
        data["gpus"] = [gpu.model_dump() for gpu in self.gpus]
        data["dual_mining"] = self.dual_mining
        return data

    def format_report(self) -> str:
        """Render the snapshot as a multi-line human-readable report."""
        lines = [
            f"Version: {self.version}",
            f"Up Time: {self.uptime_minutes}",
            "",
        ]
        sections = [
            ("Main Crypto", _crypto_lines(self.primary_crypto)),
            ("Alt Crypto", _crypto_lines(self.secondary_crypto)),
            ("Main Pool", _pool_lines(self.primary_pool)),
            ("Alt Pool", _pool_lines(self.secondary_pool)),
        ]
        for index, gpu in enumerate(self.gpus):
            sections.append((f"GPU {index}", _gpu_lines(gpu)))

        for title, body in sections:
            lines.append(title)
            lines.extend(body)
            lines.append("")

        return "\n".join(lines)


def _crypto_lines(crypto: CryptoStats):
    return [
        f"HashRate: {crypto.hash_rate}",
        f"Shares: {crypto.shares}",
        f"RejectedShares: {crypto.rejected_shares}",
        f"InvalidShares: {crypto.invalid_shares}",
    ]


def _pool_lines(pool: PoolInfo):
    return [
        f"Address: {pool.address}",
        f"Switches: {pool.switches}",
    ]


def _gpu_lines(gpu: GpuStats):
    return [
        f"Hash Rate: {gpu.primary_hash_rate}",
        f"Alt Hash Rate: {gpu.secondary_hash_rate}",
        f"Temperature: {gpu.temperature_c}",
        f"Fan Speed: {gpu.fan_speed_pct}",
    ]


class MinerEndpoint(BaseModel):
    """
    Address and password of a remote rig.

    The address is "host:port"; a bare host leaves the port to the client's
    configured default. The password is kept out of repr() so endpoints can
    be logged.
    """
    model_config = ConfigDict(frozen=True)

    address: str
    password: str = Field("", repr=False)

    @field_validator('address')
    @classmethod
    def validate_address(cls, v):
        """Require a host and, when given, a numeric port in range."""
        v = v.strip()
        if not v:
            raise ValueError("address must not be empty")
        host, port = _split_address(v)
        if not host:
            raise ValueError(f"address {v!r} has no host")
        if port is not None and not 0 < port < 65536:
            raise ValueError(f"port {port} out of range")
        return v

    @property
    def host(self) -> str:
        return _split_address(self.address)[0]

    @property
    def port(self) -> Optional[int]:
        return _split_address(self.address)[1]

    def __str__(self):
        return f"Miner {{Address: {self.address}}}"


def _split_address(address: str) -> Tuple[str, Optional[int]]:
    """Split "host:port" (or "[v6]:port") into host and optional port."""
    if address.startswith("["):
        host, _, rest = address[1:].partition("]")
        port_text = rest[1:] if rest.startswith(":") else ""
    elif address.count(":") == 1:
        host, port_text = address.split(":")
    else:
        host, port_text = address, ""

    if not port_text:
        return host, None
    if not port_text.isdigit():
        raise ValueError(f"invalid port {port_text!r} in address {address!r}")
    return host, int(port_text)


class RequestEnvelope(BaseModel):
    """
    Fields sent with every request.

    Built fresh for each call from the endpoint and never shared.
    """
    model_config = ConfigDict(frozen=True)

    id: str = REQUEST_ID
    jsonrpc: str = JSONRPC_VERSION
    psw: str = Field("", repr=False)

    @classmethod
    def for_endpoint(cls, endpoint: MinerEndpoint) -> "RequestEnvelope":
        return cls(psw=endpoint.password)

    def to_payload(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Merge the envelope with a method name and method arguments.

        Args:
            method: Remote method name
            params: Method-specific fields merged on top of the envelope

        Returns:
            Dict ready to be serialized as the request line
        """
        payload = self.model_dump()
        payload["method"] = method
        if params:
            payload.update(params)
        return payload


class RpcResponse(BaseModel):
    """Reply envelope returned by the daemon."""
    model_config = ConfigDict(extra='allow')

    id: Any = None
    result: Any = None
    error: Any = None

    @property
    def has_result(self) -> bool:
        return "result" in self.model_fields_set
