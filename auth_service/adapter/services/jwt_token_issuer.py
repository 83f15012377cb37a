"""
JWT Token Issuer

RS256 access tokens signed with the active RSA key, validated against the
key named by the token's "kid" header.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from jose import JWTError, jwt

from auth_service.adapter.services.rsa_key_provider import (
    KeyConfigurationError,
    RsaKeyProvider,
)
from auth_service.app.services.token_issuer import ITokenIssuer

logger = logging.getLogger(__name__)

ALGORITHM = "RS256"
ACCESS_TOKEN_TYPE = "access"


class JwtTokenIssuer(ITokenIssuer):
    """python-jose implementation of ITokenIssuer"""

    def __init__(self, key_provider: RsaKeyProvider, access_token_ttl_seconds: int = 86400):
        self.key_provider = key_provider
        self._access_token_ttl_seconds = access_token_ttl_seconds

    @property
    def access_token_ttl_seconds(self) -> int:
        return self._access_token_ttl_seconds

    def issue_access_token(self, account_id: UUID, subject: str, role: str) -> str:
        """
        Mint an access token.

        Args:
            account_id: User ID, carried as the user_id claim
            subject: User email, carried as sub
            role: User role

        Returns:
            Encoded JWT
        """
        now = datetime.now(UTC)
        claims = {
            "sub": subject,
            "user_id": str(account_id),
            "role": role,
            "type": ACCESS_TOKEN_TYPE,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=self._access_token_ttl_seconds)).timestamp()),
        }
        material = self.key_provider.material
        return jwt.encode(
            claims,
            material.private_pem,
            algorithm=ALGORITHM,
            headers={"kid": material.key_id},
        )

    def validate(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify signature, expiry and token type.

        Returns:
            Claims dict, or None for any failure (reason is logged)
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            logger.info("Token rejected: malformed")
            return None

        if header.get("alg") != ALGORITHM:
            logger.info("Token rejected: unexpected algorithm %s", header.get("alg"))
            return None

        key = self.key_provider.verification_key_for(header.get("kid"))
        if key is None:
            logger.info("Token rejected: unknown key id %s", header.get("kid"))
            return None

        try:
            claims = jwt.decode(token, key.public_pem, algorithms=[ALGORITHM])
        except JWTError as e:
            logger.info("Token rejected: %s", e)
            return None

        if claims.get("type") != ACCESS_TOKEN_TYPE:
            logger.info("Token rejected: wrong type %s", claims.get("type"))
            return None

        return claims

    def jwks(self) -> Dict[str, Any]:
        return self.key_provider.jwks()

    def self_test(self) -> None:
        """Issue and validate a probe token, failing startup if that does not work"""
        probe = self.issue_access_token(uuid4(), "self-test@localhost", "user")
        if self.validate(probe) is None:
            raise KeyConfigurationError("Token signing self-test failed")
