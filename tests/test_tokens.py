"""
tests/test_tokens.py -- Unit tests for password hashing and session JWTs.

Coverage:
  - bcrypt hash/verify round trip, wrong password, malformed hash
  - Token round trip carries user_id, email, name; exp - iat is exactly 7 days
  - Expired, tampered, wrong-secret and garbage tokens decode to None
  - authenticate_user() for unknown email, wrong password, success
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import jwt

from auth.tokens import (
    _DUMMY_HASH,
    authenticate_user,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from core.config import SESSION_TTL_SECONDS

TEST_PASSWORD = "testpass123"

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def test_hash_verifies_with_original_password():
    hashed = hash_password("s3cret!")
    assert hashed != "s3cret!"
    assert verify_password("s3cret!", hashed)


def test_wrong_password_does_not_verify():
    assert not verify_password("guess", hash_password("s3cret!"))


def test_same_password_hashes_differently():
    """Each hash gets its own salt."""
    assert hash_password("s3cret!") != hash_password("s3cret!")


def test_malformed_hash_is_a_mismatch_not_an_error():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_dummy_hash_is_a_real_bcrypt_hash():
    assert _DUMMY_HASH.startswith("$2")


def test_password_longer_than_72_bytes_hashes_and_verifies():
    long_password = "a" * 100
    hashed = hash_password(long_password)
    assert verify_password(long_password, hashed)


def test_short_multibyte_password_over_72_bytes():
    """20 emoji are 20 characters but 80 UTF-8 bytes."""
    emoji_password = "\U0001f600" * 20
    hashed = hash_password(emoji_password)
    assert verify_password(emoji_password, hashed)
    assert not verify_password("\U0001f600" * 17, hashed)


def test_only_first_72_bytes_count():
    hashed = hash_password("x" * 72 + "tail-one")
    assert verify_password("x" * 72 + "tail-two", hashed)


# ---------------------------------------------------------------------------
# Token round trip
# ---------------------------------------------------------------------------


def test_token_round_trip():
    token = create_access_token(7, "a@example.com", "Alice")
    claims = decode_access_token(token)
    assert claims is not None
    assert claims.user_id == 7
    assert claims.email == "a@example.com"
    assert claims.name == "Alice"


def test_token_lifetime_is_seven_days():
    claims = decode_access_token(create_access_token(1, "a@example.com", "Alice"))
    assert claims.expires_at - claims.issued_at == timedelta(seconds=SESSION_TTL_SECONDS)
    assert SESSION_TTL_SECONDS == 604800


def test_token_claims_are_timezone_aware():
    claims = decode_access_token(create_access_token(1, "a@example.com", "Alice"))
    assert claims.issued_at.tzinfo is not None


def test_token_issued_almost_seven_days_ago_is_still_valid():
    now = datetime.now(timezone.utc) - timedelta(seconds=SESSION_TTL_SECONDS - 60)
    assert decode_access_token(create_access_token(1, "a@example.com", "Alice", now=now)) is not None


# ---------------------------------------------------------------------------
# Token rejection -- every failure is None, never an exception
# ---------------------------------------------------------------------------


def test_expired_token_is_rejected():
    issued = datetime.now(timezone.utc) - timedelta(seconds=SESSION_TTL_SECONDS + 1)
    assert decode_access_token(create_access_token(1, "a@example.com", "Alice", now=issued)) is None


def test_tampered_signature_is_rejected():
    token = create_access_token(1, "a@example.com", "Alice")
    header, payload, signature = token.split(".")
    # Flip a character in the middle of the signature; the last base64url
    # character may only carry padding bits.
    mid = len(signature) // 2
    flipped = "A" if signature[mid] != "A" else "B"
    tampered = ".".join([header, payload, signature[:mid] + flipped + signature[mid + 1 :]])
    assert decode_access_token(tampered) is None


def test_tampered_claims_are_rejected():
    """Swapping in a payload for another user invalidates the signature."""
    token = create_access_token(1, "a@example.com", "Alice")
    forged_payload = create_access_token(2, "b@example.com", "Bob").split(".")[1]
    header, _payload, signature = token.split(".")
    assert decode_access_token(".".join([header, forged_payload, signature])) is None


def test_token_signed_with_another_secret_is_rejected():
    now = int(datetime.now(timezone.utc).timestamp())
    forged = jwt.encode(
        {"user_id": 1, "email": "a@example.com", "name": "A", "iat": now, "exp": now + 60},
        "some-other-secret",
        algorithm="HS256",
    )
    assert decode_access_token(forged) is None


def test_garbage_tokens_are_rejected():
    for garbage in ("", "not-a-jwt", "a.b.c", "...", "eyJhbGciOiJIUzI1NiJ9"):
        assert decode_access_token(garbage) is None


def test_token_missing_claims_is_rejected():
    from auth import tokens

    now = int(datetime.now(timezone.utc).timestamp())
    token = jwt.encode({"sub": "1", "iat": now, "exp": now + 60}, tokens._settings.jwt_secret, algorithm="HS256")
    assert decode_access_token(token) is None


# ---------------------------------------------------------------------------
# authenticate_user
# ---------------------------------------------------------------------------


def test_authenticate_user_success(stores, make_user):
    user_store, _ = stores
    user, _token = make_user()
    found = authenticate_user(user_store, user.email, TEST_PASSWORD)
    assert found is not None
    assert found.id == user.id


def test_authenticate_user_wrong_password(stores, make_user):
    user_store, _ = stores
    user, _token = make_user()
    assert authenticate_user(user_store, user.email, "wrong-password") is None


def test_authenticate_user_unknown_email(stores):
    user_store, _ = stores
    assert authenticate_user(user_store, "nobody@example.com", TEST_PASSWORD) is None
