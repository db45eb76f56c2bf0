import time

import pytest
from jose import jwt

from interview_coach.auth import FirebaseTokenVerifier, authenticate, extract_bearer_token
from interview_coach.errors import AuthFailure, Unauthorized, UpstreamUnavailableError

PROJECT = "coach-test"
SECRET = "test-signing-secret"


def make_verifier():
    return FirebaseTokenVerifier(PROJECT, key_provider=lambda: SECRET, algorithms=["HS256"])


def make_token(**overrides):
    now = int(time.time())
    claims = {
        "iss": f"https://securetoken.google.com/{PROJECT}",
        "aud": PROJECT,
        "sub": "user-1",
        "user_id": "user-1",
        "iat": now,
        "exp": now + 3600,
    }
    claims.update(overrides)
    return jwt.encode(claims, SECRET, algorithm="HS256")


@pytest.mark.parametrize("header,expected", [
    ("Bearer abc123", "abc123"),
    (None, None),
    ("", None),
    ("Token abc123", None),
    ("bearer abc123", None),
    ("Bearer ", None),
    ("Bearer  abc123", None),
    ("Bearer abc 123", None),
])
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


def test_valid_token_yields_identity(verifier):
    identity = authenticate("Bearer abc123", verifier)
    assert identity.uid == "user-1"
    assert dict(identity.claims) == verifier.tokens["abc123"]
    assert verifier.calls == 1


def test_claims_are_read_only(verifier):
    identity = authenticate("Bearer abc123", verifier)
    with pytest.raises(TypeError):
        identity.claims["uid"] = "someone-else"


@pytest.mark.parametrize("header", [None, "Token abc123", "Bearer"])
def test_missing_token_skips_verifier(verifier, header):
    with pytest.raises(Unauthorized) as exc_info:
        authenticate(header, verifier)
    assert exc_info.value.reason is AuthFailure.MISSING_TOKEN
    assert exc_info.value.status_code == 401
    assert verifier.calls == 0


def test_rejected_token_is_invalid(verifier):
    with pytest.raises(Unauthorized) as exc_info:
        authenticate("Bearer nope", verifier)
    assert exc_info.value.reason is AuthFailure.INVALID_TOKEN
    assert verifier.calls == 1


def test_claims_without_user_id_are_invalid(verifier):
    verifier.tokens["anon"] = {"email": "x@example.com"}
    with pytest.raises(Unauthorized) as exc_info:
        authenticate("Bearer anon", verifier)
    assert exc_info.value.reason is AuthFailure.INVALID_TOKEN


def test_unconfigured_verifier_is_upstream_error():
    with pytest.raises(UpstreamUnavailableError):
        authenticate("Bearer abc123", None)


def test_firebase_verifier_accepts_good_token():
    claims = make_verifier().verify(make_token())
    assert claims["sub"] == "user-1"
    assert authenticate(f"Bearer {make_token()}", make_verifier()).uid == "user-1"


@pytest.mark.parametrize("overrides", [
    {"aud": "other-project"},
    {"iss": "https://securetoken.google.com/other-project"},
    {"exp": int(time.time()) - 60},
])
def test_firebase_verifier_rejects_bad_claims(overrides):
    with pytest.raises(Unauthorized) as exc_info:
        authenticate(f"Bearer {make_token(**overrides)}", make_verifier())
    assert exc_info.value.reason is AuthFailure.INVALID_TOKEN


def test_firebase_verifier_rejects_wrong_signature():
    token = jwt.encode({"sub": "user-1", "aud": PROJECT}, "another-secret", algorithm="HS256")
    with pytest.raises(Unauthorized):
        authenticate(f"Bearer {token}", make_verifier())


def test_key_fetch_failure_is_invalid_token():
    def broken_keys():
        raise ConnectionError("keys endpoint down")

    verifier = FirebaseTokenVerifier(PROJECT, key_provider=broken_keys, algorithms=["HS256"])
    with pytest.raises(Unauthorized) as exc_info:
        authenticate(f"Bearer {make_token()}", verifier)
    assert exc_info.value.reason is AuthFailure.INVALID_TOKEN
