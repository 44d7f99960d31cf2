from dataclasses import dataclass

from jose import JWTError, jwt
from fleet_rbac.config import settings
from fleet_rbac.core.exceptions import UnauthorizedException


@dataclass(frozen=True)
class TokenClaims:
    """
    Identity carried by an access token from the fleet auth service.

    Attributes:
        auth_user_id: The 'sub' claim, matched against User.auth_user_id
        tenant_id: Tenant claim when the auth service issued one; the
            stored user's tenant is authoritative and must agree with it
    """

    auth_user_id: str
    tenant_id: str | None = None


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using shared SECRET_KEY.

    Checks signature, algorithm, expiry and, when JWT_ISSUER is set, the
    'iss' claim.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub', 'exp' and optional tenant claim

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
        )
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")

    if payload.get("exp") is None:
        raise UnauthorizedException("Token missing expiration")

    return payload


def read_claims(token: str) -> TokenClaims:
    """
    Extract the caller's identity from a JWT token.

    Raises:
        UnauthorizedException: If the subject is missing or blank, or the
            tenant claim is not a string
    """
    payload = decode_jwt(token)

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        raise UnauthorizedException("Token missing user identifier")

    tenant_id = payload.get(settings.JWT_TENANT_CLAIM)
    if tenant_id is not None and not isinstance(tenant_id, str):
        raise UnauthorizedException("Token tenant claim must be a string")

    return TokenClaims(auth_user_id=subject.strip(), tenant_id=tenant_id)
