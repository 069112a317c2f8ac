"""Tests for projector reply parsing."""

import pytest

from pjlink_projector import (
    PJLinkResponse,
    PJLinkAuthenticationError,
    PJLinkEmptyResponseError,
    PJLinkResponseError,
)


def test_parse_ok():
    response = PJLinkResponse.parse("%1POWR=OK")
    assert response.pjlink_class == "1"
    assert response.command == "POWR"
    assert response.tokens == ("OK",)
    assert response.success
    assert response.is_success()
    assert response.error_code is None


def test_parse_error_code_is_data():
    response = PJLinkResponse.parse("%1POWR=ERR2")
    assert response.tokens == ("ERR2",)
    assert not response.success
    assert response.error_code == "ERR2"
    assert response.error_description == "Out of parameter"


def test_parse_value():
    response = PJLinkResponse.parse(b"%1POWR=1\r")
    assert response.value == "1"
    assert not response.success


def test_parse_extra_tokens():
    response = PJLinkResponse.parse("%1LAMP=1200 1 800 0\r")
    assert response.command == "LAMP"
    assert response.tokens == ("1200", "1", "800", "0")
    assert response.value == "1200"


def test_parse_empty_value():
    assert PJLinkResponse.parse("%1NAME=").tokens == ("",)


@pytest.mark.parametrize("line", ["PJLINK ERRA", "PJLINK ERRA\r", b"%1POWR=ERRA\r"])
def test_auth_failure(line):
    with pytest.raises(PJLinkAuthenticationError):
        PJLinkResponse.parse(line)


@pytest.mark.parametrize("line", ["", "\r", b""])
def test_empty(line):
    with pytest.raises(PJLinkEmptyResponseError):
        PJLinkResponse.parse(line)


@pytest.mark.parametrize("line", ["garbage", "%1POWR", "%1POWR OK", "1POWR=OK"])
def test_malformed(line):
    with pytest.raises(PJLinkResponseError):
        PJLinkResponse.parse(line)


def test_empty_response_is_a_parse_error():
    assert issubclass(PJLinkEmptyResponseError, PJLinkResponseError)


def test_to_jsonable():
    assert PJLinkResponse.parse("%1INST=11 31").to_jsonable() == {
        "class": "1",
        "command": "INST",
        "response": ["11", "31"],
    }


def test_response_is_read_only():
    response = PJLinkResponse.parse("%1POWR=OK")
    with pytest.raises(AttributeError):
        response.tokens = ("ERR1",)  # type: ignore[misc]
    with pytest.raises(AttributeError):
        response.command = "INPT"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        response.pjlink_class = "2"  # type: ignore[misc]
    assert response.success
