from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session, joinedload
from typing import List
from datetime import timedelta
from stockroom.core.database import get_db
from stockroom.core.exceptions import ConflictError
from stockroom.core.logging_config import get_logger
from stockroom.core.security import verify_password, get_password_hash, create_access_token
from stockroom.core.config import settings
from stockroom.core.permissions import get_user_permissions, role_name
from stockroom.models.user import User, Role
from stockroom.schemas.auth import Token, UserCreate, UserResponse, PermissionsResponse
from stockroom.api.v1.dependencies import get_current_user, require_permission_dependency

router = APIRouter()
logger = get_logger(__name__)

def _user_response(user: User) -> UserResponse:
    user_response = UserResponse.model_validate(user)
    user_response.role_name = user.role.name if user.role else None
    return user_response

@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """
    Login endpoint - Returns JWT token for authenticated users
    Note: OAuth2PasswordRequestForm uses 'username' field, but we accept email as username
    """
    user = db.query(User).options(joinedload(User.role)).filter(User.email == form_data.username).first()
    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.warning(f"Failed login for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")

    access_token = create_access_token(
        data={"sub": user.email, "role": role_name(user)},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information"""
    return _user_response(current_user)

@router.get("/users", response_model=List[UserResponse])
def list_users(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("users", "view"))
):
    users = (
        db.query(User)
        .options(joinedload(User.role))
        .order_by(User.email)
        .offset(skip)
        .limit(limit)
        .all()
    )
    return [_user_response(u) for u in users]

@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("users", "create"))
):
    """Create a staff or admin account - Admin only"""
    if db.query(User).filter(User.email == user_data.email).first():
        raise ConflictError(f"Email {user_data.email} already registered")

    role = db.query(Role).filter(Role.name == user_data.role).first()
    if not role:
        raise HTTPException(status_code=400, detail="Invalid role")

    user = User(
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        full_name=user_data.full_name,
        role_id=role.id
    )
    db.add(user)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info(f"User {user.email} created with role {role.name} by {current_user.email}")
    return _user_response(user)

@router.get("/permissions", response_model=PermissionsResponse)
def get_my_permissions(current_user: User = Depends(get_current_user)):
    """
    Get permissions for the current user
    Returns what modules and actions the user can access
    """
    return {
        "user_id": current_user.id,
        "email": current_user.email,
        "role": role_name(current_user),
        "permissions": get_user_permissions(current_user)
    }
