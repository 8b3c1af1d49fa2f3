from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from typing import Optional
from flashdeck.core.cache import view_cache
from flashdeck.core.database import get_session
from flashdeck.core.security import CurrentUser, features_for_plan, get_optional_user, require_user
from flashdeck.models import User
from flashdeck.schemas.auth import LoginRequest, RegisterRequest, AuthResponse, UserResponse, UpdatePlanRequest

router = APIRouter(prefix="/auth", tags=["auth"])


def build_user_response(user: User) -> UserResponse:
    """Serialize a user together with the features their plan grants."""
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        plan=user.plan,
        features=sorted(feature.value for feature in features_for_plan(user.plan)),
        created_at=user.created_at
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    session: Session = Depends(get_session)
):
    """Login with username/email and password."""
    # Try to find user by username or email
    statement = select(User).where(
        (User.username == login_data.username) | (User.email == login_data.username)
    )
    user = session.exec(statement).first()

    if not user or not user.verify_password(login_data.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username/email or password"
        )

    return AuthResponse(user=build_user_response(user), message="Login successful")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    register_data: RegisterRequest,
    session: Session = Depends(get_session)
):
    """Register a new user on the free plan."""
    # Check if username already exists
    existing_user = session.exec(select(User).where(User.username == register_data.username)).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already exists"
        )

    # Check if email already exists
    existing_email = session.exec(select(User).where(User.email == register_data.email)).first()
    if existing_email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already exists"
        )

    new_user = User(
        username=register_data.username,
        email=register_data.email,
        password=User.hash_password(register_data.password)
    )

    session.add(new_user)
    session.commit()
    session.refresh(new_user)

    return AuthResponse(user=build_user_response(new_user), message="Registration successful")


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Get the authenticated user."""
    current_user = require_user(current_user)
    return build_user_response(session.get(User, current_user.id))


@router.patch("/plan", response_model=AuthResponse)
async def update_plan(
    update_data: UpdatePlanRequest,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Switch the authenticated user's plan. Stands in for the billing provider's webhook."""
    current_user = require_user(current_user)
    user = session.get(User, current_user.id)
    user.plan = update_data.plan.value
    session.add(user)
    session.commit()
    session.refresh(user)

    # Cached pages show plan-dependent limits and features
    view_cache.invalidate_user(user.id)

    return AuthResponse(user=build_user_response(user), message="Plan updated successfully")
