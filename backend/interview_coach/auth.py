# backend/interview_coach/auth.py
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests
from fastapi import Request
from jose import jwt, JWTError

from . import config
from .errors import AuthFailure, Unauthorized, UpstreamUnavailableError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthenticatedIdentity:
    uid: str
    claims: Mapping[str, Any]


class TokenVerifier:
    """verify(token) returns the token's claims or raises; the cause is not inspected."""

    def verify(self, token: str) -> Dict[str, Any]:
        raise NotImplementedError


def _fetch_google_keys() -> Dict[str, Any]:
    r = requests.get(config.FIREBASE_JWKS_URL, timeout=config.FIREBASE_KEYS_TIMEOUT)
    r.raise_for_status()
    return r.json()


class FirebaseTokenVerifier(TokenVerifier):
    """
    Verifies Firebase ID tokens: RS256 signature against Google's published keys,
    audience = project id, issuer = https://securetoken.google.com/<project id>.
    Keys are fetched on every call; key_provider and algorithms can be swapped in tests.
    """

    def __init__(
        self,
        project_id: str,
        key_provider: Callable[[], Any] = _fetch_google_keys,
        algorithms: Optional[List[str]] = None,
    ):
        self.project_id = project_id
        self.issuer = f"https://securetoken.google.com/{project_id}"
        self.key_provider = key_provider
        self.algorithms = algorithms or ["RS256"]

    def verify(self, token: str) -> Dict[str, Any]:
        keys = self.key_provider()
        claims = jwt.decode(
            token,
            keys,
            algorithms=self.algorithms,
            audience=self.project_id,
            issuer=self.issuer,
        )
        if not claims.get("sub"):
            raise JWTError("Token has no subject")
        return claims


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):]
    if not token or any(c.isspace() for c in token):
        return None
    return token


def authenticate(authorization: Optional[str], verifier: Optional[TokenVerifier]) -> AuthenticatedIdentity:
    token = extract_bearer_token(authorization)
    if token is None:
        raise Unauthorized(AuthFailure.MISSING_TOKEN)
    if verifier is None:
        raise UpstreamUnavailableError("Identity verification not configured (FIREBASE_PROJECT_ID)")

    try:
        claims = verifier.verify(token)
    except Exception as e:
        logger.warning("Token verification failed: %s", e)
        raise Unauthorized(AuthFailure.INVALID_TOKEN)

    uid = None
    if isinstance(claims, Mapping):
        uid = claims.get("uid") or claims.get("user_id") or claims.get("sub")
    if not uid:
        logger.warning("Verified token carries no user id")
        raise Unauthorized(AuthFailure.INVALID_TOKEN)
    return AuthenticatedIdentity(uid=str(uid), claims=MappingProxyType(dict(claims)))


def build_verifier() -> Optional[TokenVerifier]:
    if not config.FIREBASE_PROJECT_ID:
        logger.warning("FIREBASE_PROJECT_ID not set. Protected endpoints will answer 500.")
        return None
    return FirebaseTokenVerifier(config.FIREBASE_PROJECT_ID)


# -------- FASTAPI DEPENDENCY --------
def require_identity(request: Request) -> AuthenticatedIdentity:
    identity = authenticate(request.headers.get("authorization"), request.app.state.verifier)
    request.state.identity = identity
    return identity
