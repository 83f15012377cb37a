from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import jwt

from auth_service.adapter.services.jwt_token_issuer import JwtTokenIssuer
from auth_service.adapter.services.rsa_key_provider import (
    KeyConfigurationError,
    RsaKeyProvider,
    load_key_material,
)


def _issuer(keys, key_id="test-key", ttl=3600, additional=None):
    provider = RsaKeyProvider.from_config(
        keys["private_pkcs8"],
        keys["public_spki"],
        key_id=key_id,
        additional_public_keys=additional,
    )
    return JwtTokenIssuer(provider, access_token_ttl_seconds=ttl)


def test_issue_then_validate_returns_claims(token_issuer):
    # Arrange
    user_id = uuid4()

    # Act
    token = token_issuer.issue_access_token(user_id, "user@example.com", "user")
    claims = token_issuer.validate(token)

    # Assert
    assert claims is not None
    assert claims["sub"] == "user@example.com"
    assert claims["user_id"] == str(user_id)
    assert claims["role"] == "user"
    assert claims["type"] == "access"
    assert claims["exp"] - claims["iat"] == 3600


def test_header_carries_algorithm_and_key_id(token_issuer):
    token = token_issuer.issue_access_token(uuid4(), "user@example.com", "admin")

    header = jwt.get_unverified_header(token)

    assert header["alg"] == "RS256"
    assert header["kid"] == "test-key"


@pytest.mark.parametrize("private_format", ["private_pkcs8", "private_pkcs1"])
def test_round_trip_with_escaped_and_headerless_keys(rsa_keys, private_format):
    # Arrange
    escaped_private = rsa_keys[private_format].replace("\n", "\\n")
    headerless_public = "".join(
        line for line in rsa_keys["public_spki"].splitlines() if not line.startswith("-----")
    )
    issuer = JwtTokenIssuer(RsaKeyProvider(load_key_material(escaped_private, headerless_public)))

    # Act
    claims = issuer.validate(issuer.issue_access_token(uuid4(), "a@b.com", "user"))

    # Assert
    assert claims is not None


def test_token_from_another_key_pair_is_rejected(rsa_keys, other_rsa_keys):
    # Arrange: same kid, different keys
    issuer_a = _issuer(rsa_keys)
    issuer_b = _issuer(other_rsa_keys)

    # Act
    token = issuer_a.issue_access_token(uuid4(), "user@example.com", "user")

    # Assert
    assert issuer_b.validate(token) is None


def test_historical_key_still_validates(rsa_keys, other_rsa_keys):
    # Arrange: old issuer signed with other_rsa_keys, new one lists it as additional
    old_issuer = _issuer(other_rsa_keys, key_id="old")
    new_issuer = _issuer(
        rsa_keys, key_id="new", additional={"old": other_rsa_keys["public_spki"]}
    )

    # Act
    token = old_issuer.issue_access_token(uuid4(), "user@example.com", "user")

    # Assert
    assert new_issuer.validate(token) is not None


def test_unknown_kid_is_rejected(rsa_keys):
    issuer = _issuer(rsa_keys, key_id="k1")
    other = _issuer(rsa_keys, key_id="k2")

    token = other.issue_access_token(uuid4(), "user@example.com", "user")

    assert issuer.validate(token) is None


def test_missing_kid_is_rejected(token_issuer, key_provider):
    token = jwt.encode(
        {"sub": "x@example.com", "type": "access", "exp": datetime.now(UTC) + timedelta(hours=1)},
        key_provider.material.private_pem,
        algorithm="RS256",
    )

    assert token_issuer.validate(token) is None


def test_expired_token_is_rejected(rsa_keys):
    issuer = _issuer(rsa_keys, ttl=-10)

    token = issuer.issue_access_token(uuid4(), "user@example.com", "user")

    assert issuer.validate(token) is None


def test_wrong_token_type_is_rejected(token_issuer, key_provider):
    token = jwt.encode(
        {
            "sub": "x@example.com",
            "type": "refresh",
            "exp": datetime.now(UTC) + timedelta(hours=1),
        },
        key_provider.material.private_pem,
        algorithm="RS256",
        headers={"kid": key_provider.key_id},
    )

    assert token_issuer.validate(token) is None


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "eyJhbGciOiJub25lIn0.e30."])
def test_malformed_tokens_are_rejected(token_issuer, token):
    assert token_issuer.validate(token) is None


def test_self_test_passes_with_valid_keys(token_issuer):
    token_issuer.self_test()


def test_self_test_fails_when_active_key_cannot_verify(rsa_keys, other_rsa_keys):
    # Arrange: verification table holds the wrong public key under the active kid
    provider = RsaKeyProvider(load_key_material(rsa_keys["private_pkcs8"], rsa_keys["public_spki"]))
    wrong = RsaKeyProvider(
        load_key_material(other_rsa_keys["private_pkcs8"], other_rsa_keys["public_spki"])
    )
    provider._verification_keys[provider.key_id] = wrong.material.as_verification_key()

    # Act / Assert
    with pytest.raises(KeyConfigurationError):
        JwtTokenIssuer(provider).self_test()
