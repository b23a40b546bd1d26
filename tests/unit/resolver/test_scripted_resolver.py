"""Unit tests for the scripted resolver double."""

from __future__ import annotations

import pytest

from trustee_pin.errors import ResolutionError
from trustee_pin.resolver import KeyResolver, ScriptedResolver


@pytest.mark.unit
def test_outcomes_are_consumed_in_order_and_last_repeats() -> None:
    """Scripts should play in order, then repeat their final outcome."""
    resolver = ScriptedResolver({"http://a": [RuntimeError("down"), "k1", "k2"]})

    with pytest.raises(ResolutionError) as excinfo:
        resolver.fetch_key("http://a", "p", "", None)
    assert excinfo.value.url == "http://a"
    assert resolver.fetch_key("http://a", "p", "", None) == "k1"
    assert resolver.fetch_key("http://a", "p", "", None) == "k2"
    assert resolver.fetch_key("http://a", "p", "", None) == "k2"
    assert resolver.calls_for("http://a") == 4


@pytest.mark.unit
def test_unknown_url_fails() -> None:
    """URLs without a script should always fail."""
    resolver = ScriptedResolver({})

    with pytest.raises(ResolutionError):
        resolver.fetch_key("http://nowhere", "p", "", None)


@pytest.mark.unit
def test_scripted_resolver_satisfies_protocol() -> None:
    """The double should be usable wherever a KeyResolver is expected."""
    resolver: KeyResolver = ScriptedResolver.always("k", "http://a")

    assert resolver.fetch_key("http://a", "p", "", None) == "k"
