"""
Status reply decoder.

The status method answers with nine positional strings. Multi-value fields
are separated by ";":

    0  version, e.g. "13.2 - ETH"
    1  uptime in minutes
    2  primary hash rate;shares;rejected shares
    3  primary hash rate per GPU (defines the GPU count)
    4  secondary hash rate;shares;rejected shares
    5  secondary hash rate per GPU (only meaningful when dual mining)
    6  temperature;fan pairs per GPU
    7  primary pool address;secondary pool address
    8  primary invalid shares;primary pool switches;
       secondary invalid shares;secondary pool switches

Structural problems raise MalformedReplyError. Numeric sub-fields that are
missing or not integers become zero, so a partially garbled reply still
yields a snapshot.
"""

import logging
import re
from typing import Dict, List, Optional, Sequence

from .exceptions import MalformedReplyError
from .schemas import CryptoStats, GpuStats, MinerSnapshot, PoolInfo
from .utils.constants import FIELD_SEPARATOR, STATUS_FIELD_COUNT, VERSION_SUFFIX

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]{1,19}")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse a decimal integer, returning None if the text is not one."""
    if value is None or not _INT_RE.fullmatch(value):
        return None
    parsed = int(value)
    if not _INT64_MIN <= parsed <= _INT64_MAX:
        return None
    return parsed


def to_int(value: Optional[str]) -> int:
    """Parse a decimal integer, defaulting to zero."""
    parsed = parse_int(value)
    if parsed is None:
        if value:
            logger.debug(f"Non-numeric value {value!r} replaced with 0")
        return 0
    return parsed


def split_group(value: str) -> List[str]:
    return value.split(FIELD_SEPARATOR)


def _get(group: List[str], index: int) -> Optional[str]:
    return group[index] if index < len(group) else None


def parse_status_reply(fields: Sequence[str], version_suffix: str = VERSION_SUFFIX) -> MinerSnapshot:
    """
    Decode the status reply into a MinerSnapshot.

    Args:
        fields: The reply's result array
        version_suffix: Currency annotation stripped from the version string

    Returns:
        Immutable snapshot of the miner's state

    Raises:
        MalformedReplyError: If the reply is too short, a field is not a
            string, or per-GPU data does not fit the GPU count
    """
    if not isinstance(fields, (list, tuple)) or len(fields) < STATUS_FIELD_COUNT:
        raise MalformedReplyError(
            f"Status reply needs {STATUS_FIELD_COUNT} fields, got {_describe(fields)}"
        )
    for index, field in enumerate(fields[:STATUS_FIELD_COUNT]):
        if not isinstance(field, str):
            raise MalformedReplyError(f"Status field {index} is {type(field).__name__}, not str")

    version = fields[0].replace(version_suffix, "", 1) if version_suffix else fields[0]
    uptime = to_int(fields[1])

    group = split_group(fields[2])
    primary_crypto = {
        "hash_rate": to_int(_get(group, 0)),
        "shares": to_int(_get(group, 1)),
        "rejected_shares": to_int(_get(group, 2)),
    }

    group = split_group(fields[4])
    secondary_crypto = {
        "hash_rate": to_int(_get(group, 0)),
        "shares": to_int(_get(group, 1)),
        "rejected_shares": to_int(_get(group, 2)),
    }

    group = split_group(fields[7])
    primary_pool = {"address": group[0]}
    secondary_pool = {"address": _get(group, 1) or ""}

    group = split_group(fields[8])
    primary_crypto["invalid_shares"] = to_int(_get(group, 0))
    primary_pool["switches"] = to_int(_get(group, 1))
    secondary_crypto["invalid_shares"] = to_int(_get(group, 2))
    secondary_pool["switches"] = to_int(_get(group, 3))

    gpus = [{"primary_hash_rate": to_int(rate)} for rate in split_group(fields[3])]

    _apply_temperature_fan(gpus, fields[6])

    if secondary_pool["address"]:
        _apply_secondary_hash_rates(gpus, fields[5])

    return MinerSnapshot(
        version=version,
        uptime_minutes=uptime,
        primary_crypto=CryptoStats(**primary_crypto),
        secondary_crypto=CryptoStats(**secondary_crypto),
        primary_pool=PoolInfo(**primary_pool),
        secondary_pool=PoolInfo(**secondary_pool),
        gpus=tuple(GpuStats(**gpu) for gpu in gpus),
    )


def _apply_temperature_fan(gpus: List[Dict[str, int]], field: str) -> None:
    """Fill temperature and fan speed from interleaved pairs."""
    values = split_group(field) if field else []
    if len(values) % 2:
        raise MalformedReplyError(
            f"Temperature/fan field has odd sub-field count {len(values)}"
        )
    if len(values) > 2 * len(gpus):
        raise MalformedReplyError(
            f"Temperature/fan field has {len(values) // 2} pairs for {len(gpus)} GPUs"
        )

    for i, value in enumerate(values):
        key = "temperature_c" if i % 2 == 0 else "fan_speed_pct"
        gpus[i // 2][key] = to_int(value)


def _apply_secondary_hash_rates(gpus: List[Dict[str, int]], field: str) -> None:
    """Fill per-GPU secondary hash rates, skipping entries that are not integers."""
    values = split_group(field)
    if len(values) > len(gpus):
        raise MalformedReplyError(
            f"Secondary hash rate field has {len(values)} entries for {len(gpus)} GPUs"
        )

    for i, value in enumerate(values):
        hash_rate = parse_int(value)
        if hash_rate is None:
            logger.debug(f"Skipping secondary hash rate {value!r} for GPU {i}")
            continue
        gpus[i]["secondary_hash_rate"] = hash_rate


def _describe(fields) -> str:
    if not isinstance(fields, (list, tuple)):
        return type(fields).__name__
    return str(len(fields))
