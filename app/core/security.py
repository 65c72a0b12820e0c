from datetime import datetime, timedelta, UTC
from functools import lru_cache
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.config import settings
from app.core.exceptions import ErrorKind, UnauthorizedException
from app.schemas.common import is_valid_id

# Argon2 is intentionally slow; only login and password changes should hit it
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    """One-way hash of a plaintext password"""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time comparison of a plaintext password against its hash"""
    return pwd_context.verify(plain, hashed)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return pwd_context.hash("dummy-password-for-unknown-accounts")


def verify_dummy_password(plain: str) -> bool:
    """
    Burn the same hashing work as verify_password when there is no stored
    hash, so unknown emails and wrong passwords take comparable time.
    Always returns False.
    """
    pwd_context.verify(plain, _dummy_hash())
    return False


def create_access_token(
    user_id: int, email: str, expires_delta: timedelta | None = None
) -> str:
    """
    Issue a signed access token for a user.

    Only the subject id and email are embedded. Authorization-relevant
    fields (admin flags, tenant, active status) are always re-read from
    the database when the token is resolved.

    Args:
        user_id: Subject user ID, stored as the 'sub' claim
        email: User email, stored as the 'email' claim
        expires_delta: Token lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": str(user_id), "email": email, "iat": now, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (user_id), 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])

        # Validate expiration (jose checks this automatically)
        exp = payload.get("exp")
        if exp is None:
            raise UnauthorizedException("Token missing expiration", ErrorKind.INVALID_TOKEN)

        # Extract user_id from 'sub' claim
        user_id: str = payload.get("sub")
        if user_id is None:
            raise UnauthorizedException("Token missing user identifier", ErrorKind.INVALID_TOKEN)

        return payload

    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}", ErrorKind.INVALID_TOKEN)


def extract_user_id(token: str) -> int:
    """Extract the subject user ID from a JWT token"""
    payload = decode_jwt(token)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedException("Token missing user identifier", ErrorKind.INVALID_TOKEN)
    if not is_valid_id(user_id):
        raise UnauthorizedException("Token has an invalid user identifier", ErrorKind.INVALID_TOKEN)
    return user_id
