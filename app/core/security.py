"""Security related functions."""

import time

import httpx
import jwt
from fastapi import HTTPException, status
from jwt import InvalidTokenError

from app.core.config import settings

JWKS_CACHE_SECONDS = 3600


class FirebaseAuthenticator:
    """
    Handles Firebase ID token verification.

    ID tokens are RS256 JWTs signed with Google's rotating service account
    keys. The public keys are fetched from the JWKS endpoint and cached;
    the audience must be the Firebase project id and the issuer
    ``https://securetoken.google.com/<project id>``.

    :ivar project_id: The Firebase project the tokens are issued for.
    :type project_id: str
    :ivar jwks_url: Endpoint serving the signing keys as a JWK set.
    :type jwks_url: str
    """

    def __init__(self):
        self.project_id = settings.firebase_project_id
        self.jwks_url = settings.firebase_jwks_url
        self.verify_signature = settings.auth_verify_signature
        self._jwks: dict | None = None
        self._jwks_fetched_at = 0.0

    @property
    def issuer(self) -> str:
        return f"https://securetoken.google.com/{self.project_id}"

    async def get_jwks(self) -> dict:
        """Get the JWK set, refreshing the cached copy every hour."""
        if self._jwks is None or time.monotonic() - self._jwks_fetched_at > JWKS_CACHE_SECONDS:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.get(self.jwks_url)
                response.raise_for_status()
                self._jwks = response.json()
                self._jwks_fetched_at = time.monotonic()
        return self._jwks

    async def get_signing_key(self, token: str):
        kid = jwt.get_unverified_header(token).get("kid")
        jwks = await self.get_jwks()
        for key in jwks.get("keys", []):
            if key.get("kid") == kid:
                return jwt.PyJWK(key).key
        raise InvalidTokenError("Signing key not found")

    async def verify_token(self, token: str) -> dict:
        """
        Verifies a Firebase ID token and returns its claims.

        With signature verification disabled (local development only) the
        token is decoded without checking signature, audience or expiry.

        :param token: The encoded ID token.
        :return: The decoded claims.
        :raises HTTPException: 401 if the token is invalid or expired.
        """
        try:
            if not self.verify_signature:
                return jwt.decode(
                    token,
                    options={"verify_signature": False, "verify_aud": False, "verify_exp": False},
                )

            key = await self.get_signing_key(token)
            return jwt.decode(
                token,
                key=key,
                algorithms=["RS256"],
                audience=self.project_id,
                issuer=self.issuer,
                options={"require": ["exp", "iat", "sub"]},
            )
        except (InvalidTokenError, httpx.HTTPError) as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid authentication token: {str(e)}",
            ) from e
