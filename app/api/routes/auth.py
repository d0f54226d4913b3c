from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user_obj
from app.core.errors import Unauthorized
from app.core.security import verify_password, create_access_token
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.auth import SignupRequest, SignupResponse, TokenResponse
from app.schemas.profile import ProfileResponse
from app.services.profile_service import create_user

router = APIRouter(prefix="/auth", tags=["Auth"])


# ✅ USER SIGNUP
@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=SignupResponse)
def signup(
    request: SignupRequest,
    db: Session = Depends(get_db)
):
    user = create_user(
        db,
        email=request.email,
        password=request.password,
        role=request.role,
        display_name=request.display_name,
    )
    return SignupResponse(user_id=user.id)


# ✅ OAUTH2 LOGIN FOR SWAGGER + JWT
@router.post("/login", response_model=TokenResponse)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    # Swagger sends "username", but we treat it as email
    user = db.query(User).filter(User.email == form_data.username.lower()).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        raise Unauthorized("Invalid credentials")

    token = create_access_token({"sub": user.id, "role": user.role})

    return TokenResponse(access_token=token)


@router.get("/me", response_model=ProfileResponse)
def me(user: User = Depends(get_current_user_obj)):
    return ProfileResponse.model_validate(user)
