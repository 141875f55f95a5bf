import secrets

import pytest

from fastmile.hashing import (
    base64url_escape,
    hex_hash,
    paired_hash,
    paired_hash_url_safe,
)


def test_paired_hash():
    assert paired_hash("a", "b") == "Z4OjHqv2jMwGYPk1wIJigr3SJB86gKny0Q1Zrqnrtdg="
    assert paired_hash("x", "6") == "R8mywM9gsIGxE8ka4G5/BslCm6Z7b5cOc7mw+L83fyw="


def test_paired_hash_url_safe_maps_every_character():
    assert (
        paired_hash_url_safe("x", "6")
        == "R8mywM9gsIGxE8ka4G5_BslCm6Z7b5cOc7mw-L83fyw."
    )


def test_base64url_escape_keeps_padding():
    assert base64url_escape("a+b/c==") == "a-b_c.."
    assert base64url_escape("plain") == "plain"


@pytest.mark.parametrize(
    ("first", "second"),
    [
        ("admin", "AAAA"),
        ("", ""),
        ("user@example.com", "n+/="),
        ("ünïcode", "ключ"),
        *[(secrets.token_hex(8), secrets.token_urlsafe(12)) for _ in range(20)],
    ],
)
def test_paired_hash_url_safe_alphabet(first, second):
    result = paired_hash_url_safe(first, second)
    assert not set(result) & {"+", "/", "="}
    assert len(result) == 44


def test_hex_hash():
    assert (
        hex_hash("")
        == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )
    assert (
        hex_hash("salt1pw")
        == "c0aad6fee0642dd210b510923f13bae43625185baa91ddf30ed3cf92c8ff3754"
    )
