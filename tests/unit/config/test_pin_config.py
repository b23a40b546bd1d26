"""Unit tests for pin config parsing."""

from __future__ import annotations

import json
import tomllib
from collections.abc import Callable

import pytest

from trustee_pin.config import (
    DEFAULT_ATTEMPTS,
    FiniteRetries,
    InfiniteRetries,
    PinConfig,
    dump_retry_policy,
    parse_pin_config,
    parse_retry_policy,
)
from trustee_pin.errors import ConfigError, NoServersError


@pytest.mark.unit
def test_parse_minimal_config_applies_default_retry_policy(
    config_json: Callable[..., str],
) -> None:
    """Absent num_retries should stay absent and default to ten attempts."""
    config = parse_pin_config(config_json())

    assert config.num_retries is None
    assert config.initdata is None
    assert config.retry_policy() == FiniteRetries(attempts=DEFAULT_ATTEMPTS)
    assert DEFAULT_ATTEMPTS == 10


@pytest.mark.unit
def test_parse_config_keeps_server_order_and_certs() -> None:
    """Servers should be kept in listed order with their certificates."""
    raw = json.dumps(
        {
            "servers": [
                {"url": "http://b.example", "cert": "PEM-B"},
                {"url": "http://a.example"},
            ],
            "path": "default/luks/key1",
        }
    )

    config = parse_pin_config(raw)

    assert [s.url for s in config.servers] == ["http://b.example", "http://a.example"]
    assert config.servers[0].cert == "PEM-B"
    assert config.servers[1].cert == ""


@pytest.mark.unit
@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1, FiniteRetries(attempts=1)),
        (3, FiniteRetries(attempts=3)),
        ("infinity", InfiniteRetries()),
    ],
)
def test_parse_config_accepts_valid_num_retries(
    config_json: Callable[..., str], value: object, expected: object
) -> None:
    """Positive integers and the infinity token should be accepted."""
    config = parse_pin_config(config_json(num_retries=value))

    assert config.num_retries == expected
    assert config.retry_policy() == expected


@pytest.mark.unit
@pytest.mark.parametrize("value", [0, -1, "forever", "10", 1.5, True, [3], 2**32])
def test_parse_config_rejects_invalid_num_retries(
    config_json: Callable[..., str], value: object
) -> None:
    """Zero, negatives and any other shape should fail at parse time."""
    with pytest.raises(ConfigError):
        parse_pin_config(config_json(num_retries=value))


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[]",
        json.dumps({"path": "p"}),
        json.dumps({"servers": [{"url": "http://a"}]}),
        json.dumps({"servers": [{"cert": "x"}], "path": "p"}),
        json.dumps({"servers": "http://a", "path": "p"}),
    ],
)
def test_parse_config_rejects_malformed_payloads(raw: str) -> None:
    """Malformed JSON and missing required fields should be config errors."""
    with pytest.raises(ConfigError) as excinfo:
        parse_pin_config(raw)

    assert not isinstance(excinfo.value, NoServersError)


@pytest.mark.unit
def test_parse_config_allows_empty_server_list(
    config_json: Callable[..., str],
) -> None:
    """An empty list parses; the engine rejects it before resolving."""
    config = parse_pin_config(config_json(urls=()))

    assert config.servers == ()


@pytest.mark.unit
def test_initdata_string_is_serialized_to_wire_document(
    config_json: Callable[..., str],
) -> None:
    """JSON-encoded init-data should become a TOML init-data document."""
    config = parse_pin_config(
        config_json(initdata=json.dumps({"aa.toml": "x", "policy.rego": "y"}))
    )

    assert config.initdata is not None
    document = tomllib.loads(config.initdata)
    assert document == {
        "version": "0.1.0",
        "algorithm": "sha256",
        "data": {"aa.toml": "x", "policy.rego": "y"},
    }


@pytest.mark.unit
def test_initdata_object_is_accepted(config_json: Callable[..., str]) -> None:
    """An already-decoded init-data object should be serialized the same way."""
    from_string = parse_pin_config(config_json(initdata=json.dumps({"k": "v"})))
    from_object = parse_pin_config(config_json(initdata={"k": "v"}))

    assert from_object.initdata == from_string.initdata


@pytest.mark.unit
@pytest.mark.parametrize(
    "initdata",
    ["{broken", json.dumps(["a"]), json.dumps({"k": 1}), {"k": {"nested": "v"}}, 7],
)
def test_initdata_must_be_object_of_strings(
    config_json: Callable[..., str], initdata: object
) -> None:
    """Init-data that is not an object of strings should be rejected."""
    with pytest.raises(ConfigError):
        parse_pin_config(config_json(initdata=initdata))


@pytest.mark.unit
def test_unknown_config_fields_are_ignored(config_json: Callable[..., str]) -> None:
    """Extra keys from the caller should not break parsing."""
    config = parse_pin_config(config_json(comment="kept out"))

    assert isinstance(config, PinConfig)


@pytest.mark.unit
def test_retry_policy_wire_values_round_trip() -> None:
    """Wire values should map to the tagged variant and back unchanged."""
    assert dump_retry_policy(parse_retry_policy(7)) == 7
    assert dump_retry_policy(parse_retry_policy("infinity")) == "infinity"


@pytest.mark.unit
def test_finite_retries_rejects_zero_at_construction() -> None:
    """FiniteRetries itself should refuse attempts below one."""
    with pytest.raises(ValueError):
        FiniteRetries(attempts=0)
