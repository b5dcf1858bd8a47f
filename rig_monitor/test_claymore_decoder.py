import pytest
from pydantic import ValidationError as PydanticValidationError

from claymore_client.decoder import parse_int, parse_status_reply, to_int
from claymore_client.exceptions import MalformedReplyError
from claymore_client.schemas import CryptoStats, GpuStats, PoolInfo


SINGLE_REPLY = [
    "13.2 - ETH", "542", "1200;50;1", "600;600", "0;0;0", ";",
    "61;70;58;68", "eu1.pool.com", "0;2;0;0",
]

DUAL_REPLY = [
    "15.0 - ETH", "1440", "60000;1200;3", "30000;30000", "1500000;800;2",
    "750000;750000", "65;80;67;82", "eth.pool:4444;dcr.pool:3333", "1;0;2;1",
]


def _reply(**overrides):
    fields = list(SINGLE_REPLY)
    for key, value in overrides.items():
        fields[int(key.lstrip("f"))] = value
    return fields


def test_single_currency_reply():
    snapshot = parse_status_reply(SINGLE_REPLY)

    assert snapshot.version == "13.2"
    assert snapshot.uptime_minutes == 542
    assert snapshot.primary_crypto == CryptoStats(hash_rate=1200, shares=50, rejected_shares=1, invalid_shares=0)
    assert snapshot.secondary_crypto == CryptoStats()
    assert snapshot.primary_pool == PoolInfo(address="eu1.pool.com", switches=2)
    assert snapshot.secondary_pool.address == ""
    assert snapshot.dual_mining is False
    assert list(snapshot.gpus) == [
        GpuStats(primary_hash_rate=600, secondary_hash_rate=0, temperature_c=61, fan_speed_pct=70),
        GpuStats(primary_hash_rate=600, secondary_hash_rate=0, temperature_c=58, fan_speed_pct=68),
    ]


def test_dual_mining_reply():
    snapshot = parse_status_reply(DUAL_REPLY)

    assert snapshot.dual_mining is True
    assert snapshot.secondary_crypto == CryptoStats(hash_rate=1500000, shares=800, rejected_shares=2, invalid_shares=2)
    assert snapshot.primary_crypto.invalid_shares == 1
    assert snapshot.primary_pool == PoolInfo(address="eth.pool:4444", switches=0)
    assert snapshot.secondary_pool == PoolInfo(address="dcr.pool:3333", switches=1)
    assert [gpu.secondary_hash_rate for gpu in snapshot.gpus] == [750000, 750000]


def test_decoding_is_deterministic():
    assert parse_status_reply(DUAL_REPLY) == parse_status_reply(list(DUAL_REPLY))


@pytest.mark.parametrize("field3, expected", [
    ("100", 1),
    ("100;200;300;400;500", 5),
    ("", 1),
])
def test_gpu_count_follows_primary_hash_rates(field3, expected):
    snapshot = parse_status_reply(_reply(f3=field3, f6=""))
    assert snapshot.gpu_count == expected


def test_secondary_hash_rates_ignored_without_secondary_pool():
    snapshot = parse_status_reply(_reply(f5="100;200"))

    assert snapshot.secondary_pool.address == ""
    assert all(gpu.secondary_hash_rate == 0 for gpu in snapshot.gpus)


def test_empty_secondary_pool_is_not_dual_mining():
    snapshot = parse_status_reply(_reply(f5="100;200", f7="eu1.pool.com;"))

    assert snapshot.dual_mining is False
    assert all(gpu.secondary_hash_rate == 0 for gpu in snapshot.gpus)


def test_temperature_fan_pairing():
    snapshot = parse_status_reply(_reply(f6="60;70;65;72"))

    assert (snapshot.gpus[0].temperature_c, snapshot.gpus[0].fan_speed_pct) == (60, 70)
    assert (snapshot.gpus[1].temperature_c, snapshot.gpus[1].fan_speed_pct) == (65, 72)


def test_invalid_shares_merge_keeps_counters():
    snapshot = parse_status_reply(_reply(f2="1200;50;1", f4="900;30;4", f8="2;3;1;0"))

    assert snapshot.primary_crypto == CryptoStats(hash_rate=1200, shares=50, rejected_shares=1, invalid_shares=2)
    assert snapshot.primary_pool.switches == 3
    assert snapshot.secondary_crypto == CryptoStats(hash_rate=900, shares=30, rejected_shares=4, invalid_shares=1)
    assert snapshot.secondary_pool.switches == 0


def test_non_numeric_primary_hash_rate_becomes_zero():
    snapshot = parse_status_reply(_reply(f3="100;abc;200", f6=""))
    assert [gpu.primary_hash_rate for gpu in snapshot.gpus] == [100, 0, 200]


def test_non_numeric_secondary_hash_rate_is_skipped():
    fields = list(DUAL_REPLY)
    fields[5] = "750000;off"
    snapshot = parse_status_reply(fields)
    assert [gpu.secondary_hash_rate for gpu in snapshot.gpus] == [750000, 0]


def test_short_secondary_hash_rate_list_leaves_rest_zero():
    fields = list(DUAL_REPLY)
    fields[5] = "750000"
    snapshot = parse_status_reply(fields)
    assert [gpu.secondary_hash_rate for gpu in snapshot.gpus] == [750000, 0]


def test_missing_sub_fields_default_to_zero():
    snapshot = parse_status_reply(_reply(f1="abc", f2="1200", f8="5"))

    assert snapshot.uptime_minutes == 0
    assert snapshot.primary_crypto == CryptoStats(hash_rate=1200, invalid_shares=5)
    assert snapshot.primary_pool.switches == 0
    assert snapshot.secondary_pool.switches == 0


@pytest.mark.parametrize("overrides, check", [
    ({"f6": "60;x;65;72"}, lambda s: [(g.temperature_c, g.fan_speed_pct) for g in s.gpus] == [(60, 0), (65, 72)]),
    ({"f6": "hot;70;65;72"}, lambda s: s.gpus[0].temperature_c == 0 and s.gpus[0].fan_speed_pct == 70),
    ({"f8": "a;3;1;0"}, lambda s: s.primary_crypto.invalid_shares == 0 and s.primary_pool.switches == 3),
    ({"f8": "2;3;b;c"}, lambda s: s.secondary_crypto.invalid_shares == 0 and s.secondary_pool.switches == 0),
])
def test_non_numeric_telemetry_and_invalid_shares_become_zero(overrides, check):
    assert check(parse_status_reply(_reply(**overrides)))


def test_oversized_number_becomes_zero():
    snapshot = parse_status_reply(_reply(f1="9" * 5000, f2="1200;" + "7" * 30 + ";1"))

    assert snapshot.uptime_minutes == 0
    assert snapshot.primary_crypto.shares == 0
    assert snapshot.primary_crypto.rejected_shares == 1


def test_oversized_secondary_hash_rate_is_skipped():
    fields = list(DUAL_REPLY)
    fields[5] = "9" * 5000 + ";1"
    snapshot = parse_status_reply(fields)
    assert [gpu.secondary_hash_rate for gpu in snapshot.gpus] == [0, 1]


def test_fewer_temperature_pairs_than_gpus():
    snapshot = parse_status_reply(_reply(f6="60;70"))

    assert snapshot.gpus[0].temperature_c == 60
    assert snapshot.gpus[1].temperature_c == 0
    assert snapshot.gpus[1].fan_speed_pct == 0


def test_version_suffix_stripped_once():
    assert parse_status_reply(_reply(f0="13.2")).version == "13.2"
    assert parse_status_reply(_reply(f0="9.3 - ETH - ETH")).version == "9.3 - ETH"
    assert parse_status_reply(_reply(f0="12.0 - ZEC"), version_suffix=" - ZEC").version == "12.0"


@pytest.mark.parametrize("fields", [
    SINGLE_REPLY[:8],
    [],
    "13.2 - ETH",
    None,
])
def test_short_reply_is_malformed(fields):
    with pytest.raises(MalformedReplyError):
        parse_status_reply(fields)


def test_non_string_field_is_malformed():
    with pytest.raises(MalformedReplyError):
        parse_status_reply(_reply(f1=542))


@pytest.mark.parametrize("field6", ["60;70;65", "60;70;65;72;61;73"])
def test_temperature_field_inconsistent_with_gpu_count(field6):
    with pytest.raises(MalformedReplyError):
        parse_status_reply(_reply(f6=field6))


def test_too_many_secondary_hash_rates_is_malformed():
    fields = list(DUAL_REPLY)
    fields[5] = "1;2;3"
    with pytest.raises(MalformedReplyError):
        parse_status_reply(fields)


def test_extra_fields_are_ignored():
    snapshot = parse_status_reply(SINGLE_REPLY + ["extra"])
    assert snapshot == parse_status_reply(SINGLE_REPLY)


def test_snapshot_is_frozen():
    snapshot = parse_status_reply(SINGLE_REPLY)
    with pytest.raises(PydanticValidationError):
        snapshot.uptime_minutes = 1


@pytest.mark.parametrize("text, expected", [
    ("42", 42),
    ("+5", 5),
    ("-3", -3),
    (" 5", None),
    ("5.0", None),
    ("off", None),
    ("", None),
    (None, None),
    ("9223372036854775807", 2 ** 63 - 1),
    ("-9223372036854775808", -(2 ** 63)),
    ("9223372036854775808", None),
    ("1" * 20, None),
])
def test_parse_int(text, expected):
    assert parse_int(text) == expected


def test_to_int_defaults_to_zero():
    assert to_int("12") == 12
    assert to_int("1_000") == 0
    assert to_int(None) == 0


def test_to_dict_and_report():
    snapshot = parse_status_reply(SINGLE_REPLY)

    data = snapshot.to_dict()
    assert data["dual_mining"] is False
    assert data["gpus"][1] == {
        "primary_hash_rate": 600,
        "secondary_hash_rate": 0,
        "temperature_c": 58,
        "fan_speed_pct": 68,
    }
    assert data["primary_pool"] == {"address": "eu1.pool.com", "switches": 2}

    report = snapshot.format_report()
    assert report.startswith("Version: 13.2\nUp Time: 542\n")
    assert "Main Pool\nAddress: eu1.pool.com\nSwitches: 2\n" in report
    assert "GPU 1\nHash Rate: 600\nAlt Hash Rate: 0\nTemperature: 58\nFan Speed: 68\n" in report
