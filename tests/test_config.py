"""Tests for client configuration layering."""

import pytest

from pjlink_projector import (
    PJLinkClientConfig,
    PJLinkError,
    DEFAULT_PORT,
    CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
)

ENV_VARS = [
    "PJLINK_PROJECTOR_HOST",
    "PJLINK_PROJECTOR_PORT",
    "PJLINK_PROJECTOR_PASSWORD",
    "PJLINK_PROJECTOR_TIMEOUT",
    "PJLINK_PROJECTOR_READ_TIMEOUT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = PJLinkClientConfig()
    assert config.host is None
    assert config.port == DEFAULT_PORT == 4352
    assert config.password == ""
    assert config.connect_timeout_secs == CONNECT_TIMEOUT == 10.0
    assert config.read_timeout_secs == DEFAULT_READ_TIMEOUT
    assert not config.strict_greeting


def test_environment(clean_env):
    clean_env.setenv("PJLINK_PROJECTOR_HOST", "10.0.0.5")
    clean_env.setenv("PJLINK_PROJECTOR_PORT", "14352")
    clean_env.setenv("PJLINK_PROJECTOR_PASSWORD", "secret")
    clean_env.setenv("PJLINK_PROJECTOR_TIMEOUT", "3.5")
    clean_env.setenv("PJLINK_PROJECTOR_READ_TIMEOUT", "1")
    config = PJLinkClientConfig()
    assert config.host == "10.0.0.5"
    assert config.port == 14352
    assert config.password == "secret"
    assert config.connect_timeout_secs == 3.5
    assert config.read_timeout_secs == 1.0


def test_arguments_override_environment(clean_env):
    clean_env.setenv("PJLINK_PROJECTOR_HOST", "10.0.0.5")
    clean_env.setenv("PJLINK_PROJECTOR_PASSWORD", "secret")
    config = PJLinkClientConfig("projector.local", "other", port=5000, strict_greeting=True)
    assert config.host == "projector.local"
    assert config.password == "other"
    assert config.port == 5000
    assert config.strict_greeting


def test_host_with_port(clean_env):
    config = PJLinkClientConfig("192.168.1.50:14352", port=5000)
    assert config.host == "192.168.1.50"
    assert config.port == 14352


def test_base_config(clean_env):
    base = PJLinkClientConfig("192.168.1.50", "secret", read_timeout_secs=2.0)
    config = PJLinkClientConfig(password="", base_config=base)
    assert config.host == "192.168.1.50"
    assert config.password == ""
    assert config.read_timeout_secs == 2.0


def test_no_read_timeout(clean_env):
    assert PJLinkClientConfig(no_read_timeout=True).read_timeout_secs is None


def test_invalid_environment(clean_env):
    clean_env.setenv("PJLINK_PROJECTOR_PORT", "not-a-port")
    with pytest.raises(PJLinkError):
        PJLinkClientConfig()


@pytest.mark.parametrize("spec, host, port", [
    ("[::1]:14352", "::1", 14352),
    ("[fe80::1]", "fe80::1", 4352),
    ("::1", "::1", 4352),
    ("fe80::1:2", "fe80::1:2", 4352),
    ("projector.local", "projector.local", 4352),
])
def test_ipv6_host(clean_env, spec, host, port):
    config = PJLinkClientConfig(spec)
    assert config.host == host
    assert config.port == port


@pytest.mark.parametrize("spec", ["[::1", "[::1]x", "[::1]:port"])
def test_invalid_bracketed_host(clean_env, spec):
    with pytest.raises(PJLinkError):
        PJLinkClientConfig(spec)
