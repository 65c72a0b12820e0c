import logging
from sqlalchemy.orm import Session
from app.config import settings
from app.core.exceptions import ErrorKind, UnauthorizedException, ForbiddenException
from app.core.security import (
    create_access_token,
    extract_user_id,
    verify_dummy_password,
    verify_password,
)
from app.models.identity import Identity
from app.models.user import User
from app.repositories.tenant_repository import TenantRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class AuthService:
    """Credential verification, token issuance and token resolution"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.tenant_repo = TenantRepository(db)

    def login(self, email: str, password: str) -> tuple[str, User]:
        """
        Verify credentials and issue an access token.

        An unknown email and a wrong password raise the exact same error,
        so callers cannot probe which emails are registered.

        Args:
            email: Login email
            password: Plaintext password

        Returns:
            Tuple of (access token, user)

        Raises:
            UnauthorizedException: If credentials are invalid
            ForbiddenException: If the account is disabled
        """
        user = self.user_repo.get_by_email(email)

        if user is None:
            # Spend the same hashing time as a real check before failing
            verify_dummy_password(password)
            logger.info("Login failed")
            raise UnauthorizedException(INVALID_CREDENTIALS_MESSAGE, ErrorKind.INVALID_CREDENTIALS)

        if not verify_password(password, user.password):
            logger.info("Login failed")
            raise UnauthorizedException(INVALID_CREDENTIALS_MESSAGE, ErrorKind.INVALID_CREDENTIALS)

        # Checked only after the password matched, so it leaks nothing
        if not user.is_active:
            raise ForbiddenException("Account is disabled", ErrorKind.ACCOUNT_DISABLED)

        token = create_access_token(user.id, user.email)
        logger.info("Login succeeded: user_id=%s", user.id)
        return token, user

    def resolve(self, token: str) -> Identity:
        """
        Turn a bearer token back into a fresh Identity.

        The user row is re-read on every call; nothing but the subject id
        is trusted from the token, so deactivation applies on the very
        next request.

        Raises:
            UnauthorizedException: Token invalid or subject no longer exists
            ForbiddenException: Account (or, when enforced, tenant) disabled
        """
        user_id = extract_user_id(token)

        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise UnauthorizedException("User not found", ErrorKind.USER_NOT_FOUND)

        if not user.is_active:
            raise ForbiddenException("Account is disabled", ErrorKind.ACCOUNT_DISABLED)

        if settings.ENFORCE_TENANT_ACTIVE and user.tenant_id is not None:
            tenant = self.tenant_repo.get_by_id(user.tenant_id)
            if tenant is None or not tenant.is_active:
                raise ForbiddenException("Tenant is disabled", ErrorKind.TENANT_DISABLED)

        return Identity.from_user(user)

    def get_user(self, identity: Identity) -> User:
        """Load the full user record behind an identity"""
        user = self.user_repo.get_by_id(identity.id)
        if user is None:
            raise UnauthorizedException("User not found", ErrorKind.USER_NOT_FOUND)
        return user
