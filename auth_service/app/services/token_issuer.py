from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from uuid import UUID


class ITokenIssuer(ABC):
    """Access token minting and validation - application layer"""

    @abstractmethod
    def issue_access_token(self, account_id: UUID, subject: str, role: str) -> str:
        """Mint a signed access token for the account"""
        pass

    @abstractmethod
    def validate(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the token claims, or None if the token is not acceptable"""
        pass

    @abstractmethod
    def jwks(self) -> Dict[str, Any]:
        """Public verification keys as a JWK Set"""
        pass

    @property
    @abstractmethod
    def access_token_ttl_seconds(self) -> int:
        pass
