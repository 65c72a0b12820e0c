from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_identity
from app.models.identity import Identity
from app.services.auth_service import AuthService
from app.schemas.auth_schemas import LoginRequest, LoginResponse
from app.schemas.user_schemas import UserResponse

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """
    Authenticate with email + password and receive a bearer token.

    - Unknown email and wrong password return the same 401 response
    """
    service = AuthService(db)
    token, user = service.login(body.email, body.password)
    return LoginResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
def get_me(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Return the authenticated user, read fresh from the database"""
    service = AuthService(db)
    return service.get_user(identity)
