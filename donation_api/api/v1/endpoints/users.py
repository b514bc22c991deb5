"""
User endpoints - registration and login.
"""

from fastapi import APIRouter, status

from donation_api.core.exceptions import AuthenticationError, ConflictError
from donation_api.core.security import create_access_token, hash_password, verify_password
from donation_api.db.models.user import User
from donation_api.db.repositories.user_repository import UserRepository
from donation_api.db.session import DbSession
from donation_api.schemas.user import LoginRequest, UserCreate, UserPublic

router = APIRouter()


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def register(session: DbSession, data: UserCreate):
    repo = UserRepository(session)
    if await repo.get_by_email(data.email):
        raise ConflictError("Email already registered")
    user = User(
        email=data.email,
        hashed_password=hash_password(data.password),
        full_name=data.full_name,
        phone=data.phone,
    )
    user = await repo.add(user)
    await repo.commit()
    return UserPublic.model_validate(user)


@router.post("/login")
async def login(session: DbSession, data: LoginRequest):
    """Authenticate and return a bearer JWT."""
    user = await UserRepository(session).get_by_email(data.email)
    if not user or not verify_password(data.password, user.hashed_password):
        raise AuthenticationError("Invalid email or password")
    return {"access_token": create_access_token(user.id), "token_type": "bearer", "user_id": user.id}
