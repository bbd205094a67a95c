from __future__ import annotations

import pytest

from sessionauth.application.services.password_hashing import (
    DEFAULT_COST_FACTOR,
    BcryptPasswordHasher,
)
from sessionauth.shared.errors import ValidationError


def test_hash_embeds_version_cost_and_salt(fast_hasher: BcryptPasswordHasher) -> None:
    hashed = fast_hasher.hash("secret1", cost_factor=5)

    _, version, cost, salt_and_digest = hashed.split("$")
    assert version.startswith("2")
    assert cost == "05"
    assert len(salt_and_digest) == 53
    assert "secret1" not in hashed
    assert fast_hasher.cost_of(hashed) == 5


def test_hash_uses_fresh_salt_each_call(fast_hasher: BcryptPasswordHasher) -> None:
    first = fast_hasher.hash("secret1")
    second = fast_hasher.hash("secret1")

    assert first != second
    assert fast_hasher.verify("secret1", first)
    assert fast_hasher.verify("secret1", second)


@pytest.mark.parametrize("plain", ["secret1", "pässwörd", " spaced out ", "x"])
def test_verify_matches_only_original_password(
    fast_hasher: BcryptPasswordHasher, plain: str
) -> None:
    hashed = fast_hasher.hash(plain)

    assert fast_hasher.verify(plain, hashed) is True
    assert fast_hasher.verify(plain + "!", hashed) is False
    assert fast_hasher.verify(plain.upper() + "Z", hashed) is False


def test_default_cost_factor() -> None:
    hasher = BcryptPasswordHasher()

    assert hasher.cost_factor == DEFAULT_COST_FACTOR == 8
    assert hasher.cost_of(hasher.hash("secret1")) == 8


@pytest.mark.parametrize(
    "hashed",
    [
        "",
        "secret1",
        "$2b$04$tooshort",
        "$9z$04$abcdefghijklmnopqrstuuABCDEFGHIJKLMNOPQRSTUVWXYZ01234",
        "md5:5ebe2294ecd0e0f08eab7690d2a6ee69",
    ],
)
def test_verify_returns_false_for_malformed_hash(
    fast_hasher: BcryptPasswordHasher, hashed: str
) -> None:
    assert fast_hasher.verify("secret1", hashed) is False


def test_cost_of_unparseable_hash_is_none(fast_hasher: BcryptPasswordHasher) -> None:
    assert fast_hasher.cost_of("not-a-hash") is None


def test_empty_password_is_rejected(fast_hasher: BcryptPasswordHasher) -> None:
    with pytest.raises(ValidationError):
        fast_hasher.hash("")
    assert fast_hasher.verify("", fast_hasher.hash("secret1")) is False


@pytest.mark.parametrize("cost", [3, 32])
def test_cost_factor_out_of_range(fast_hasher: BcryptPasswordHasher, cost: int) -> None:
    with pytest.raises(ValidationError) as exc_info:
        fast_hasher.hash("secret1", cost_factor=cost)
    assert exc_info.value.code == "cost_factor_out_of_range"

    with pytest.raises(ValidationError):
        BcryptPasswordHasher(cost_factor=cost)
