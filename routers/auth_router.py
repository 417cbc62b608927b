from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from core.database import get_db
from core.auth import get_current_identity
from core.security import TokenService, get_token_service
from crud.user_crud import register_user, verify_credentials
from schemas.user_schema import UserRegister, UserResponse
from schemas.auth_schema import IdentityClaim, LoginRequest, LoginResponse

router = APIRouter(prefix="/api", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=201)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    return register_user(db, payload.name, payload.email, payload.password)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Check email/password and issue a one-hour bearer token.
    """
    user = verify_credentials(db, payload.email, payload.password)
    claim = IdentityClaim(id=user.id, name=user.name, email=user.email)
    return LoginResponse(token=token_service.issue(claim), user=UserResponse.model_validate(user))


@router.get("/me", response_model=IdentityClaim)
def get_me(identity: IdentityClaim = Depends(get_current_identity)):
    return identity
