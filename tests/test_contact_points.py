"""Tests for contact point parsing."""

from __future__ import annotations

import pytest

from cqlsession.contact_points import (
    DEFAULT_CASSANDRA_PORT,
    Endpoint,
    format_contact_points,
    parse_contact_points,
)
from cqlsession.exceptions import ConfigError


def test_parses_hosts_with_and_without_ports() -> None:
    endpoints = parse_contact_points("node1:9042,node2")

    assert endpoints == [Endpoint("node1", 9042), Endpoint("node2", 9042)]


def test_missing_port_uses_default() -> None:
    (endpoint,) = parse_contact_points("10.0.0.5")

    assert endpoint.port == DEFAULT_CASSANDRA_PORT == 9042


def test_whitespace_is_trimmed_around_tokens_and_separator() -> None:
    endpoints = parse_contact_points("  node1 : 9142 ,\tnode2:9043  ")

    assert endpoints == [Endpoint("node1", 9142), Endpoint("node2", 9043)]


def test_order_is_preserved() -> None:
    hosts = [ep.host for ep in parse_contact_points("c,a,b")]

    assert hosts == ["c", "a", "b"]


@pytest.mark.parametrize("text", [None, "", "   "])
def test_empty_input_is_rejected(text: str | None) -> None:
    with pytest.raises(ConfigError):
        parse_contact_points(text)


@pytest.mark.parametrize(
    "text",
    [
        "node1,,node2",
        "node1,",
        "node1:abc",
        "node1:",
        "node1:0",
        "node1:-1",
        "node1:70000",
        "node1:9042:1",
        ":9042",
    ],
)
def test_malformed_tokens_are_rejected(text: str) -> None:
    with pytest.raises(ConfigError):
        parse_contact_points(text)


def test_format_round_trips_host_port_pairs() -> None:
    text = "node1:9042,node2:9142,10.1.2.3:19042"

    assert format_contact_points(parse_contact_points(text)) == text


def test_format_fills_in_default_port() -> None:
    assert format_contact_points(parse_contact_points("node1")) == "node1:9042"
