"""JWT verification for identity-provider session tokens.

Sessions are issued by the external identity provider and signed with its
private key; this service only holds the matching public key. Without a
configured key an ephemeral RSA key pair is generated so tokens can be minted
locally for development and tests.
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from scribo.config import settings


class JWTAuth:
    """JWT authentication handler with RS256 signing."""

    def __init__(self, public_key_pem: Optional[str] = None, algorithm: str = "RS256"):
        """Load the provider's public key, or generate an ephemeral key pair."""
        self.algorithm = algorithm
        self.access_token_expire_minutes = 60

        if public_key_pem:
            self._private_key = None
            self._public_key = serialization.load_pem_public_key(public_key_pem.encode())
        else:
            self._private_key = self._generate_private_key()
            self._public_key = self._private_key.public_key()

    def _generate_private_key(self) -> rsa.RSAPrivateKey:
        """
        Generate RSA private key.

        Only used when no identity-provider key is configured.

        Returns:
            RSA private key
        """
        return rsa.generate_private_key(public_exponent=65537, key_size=2048)

    def create_access_token(
        self,
        user_id: str,
        email: Optional[str] = None,
        additional_claims: Optional[Dict] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create a session token signed with the local private key.

        Args:
            user_id: User ID placed in the ``sub`` claim
            email: User email (optional)
            additional_claims: Additional JWT claims
            expires_delta: Token lifetime (defaults to one hour)

        Returns:
            Encoded JWT token

        Raises:
            RuntimeError: If only a public key is configured
        """
        if self._private_key is None:
            raise RuntimeError("Tokens are issued by the identity provider; no signing key is available")

        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))

        claims = {
            "sub": user_id,
            "iat": now,
            "exp": expire,
        }
        if email:
            claims["email"] = email
        if additional_claims:
            claims.update(additional_claims)

        return jwt.encode(claims, self._private_key, algorithm=self.algorithm)

    def verify_access_token(self, token: str) -> Dict:
        """
        Verify and decode a session token.

        Args:
            token: JWT token string

        Returns:
            Decoded token claims

        Raises:
            jwt.ExpiredSignatureError: If token is expired
            jwt.InvalidTokenError: If token is invalid or lacks a subject
        """
        return jwt.decode(
            token,
            self._public_key,
            algorithms=[self.algorithm],
            options={"require": ["sub", "exp"]},
        )


# Global JWT auth instance
jwt_auth = JWTAuth(settings.jwt_public_key, settings.jwt_algorithm)


def get_jwt_auth() -> JWTAuth:
    """JWT auth dependency, overridable in tests."""
    return jwt_auth
