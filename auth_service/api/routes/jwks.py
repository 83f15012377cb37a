from fastapi import APIRouter, Depends, Response, status

from auth_service.app.services.token_issuer import ITokenIssuer
from auth_service.depends import get_token_issuer

router = APIRouter(tags=["Keys"])


@router.get("/.well-known/jwks.json", status_code=status.HTTP_200_OK)
async def jwks(response: Response, token_issuer: ITokenIssuer = Depends(get_token_issuer)):
    """
    JSON Web Key Set

    Public keys for validating access tokens. Unauthenticated.
    """
    response.headers["Cache-Control"] = "public, max-age=300"
    return token_issuer.jwks()
