from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.database import get_db
from app.models import User, UserRole
from app.schemas.user import UserCreate, UserCreateResponse
from app.auth.password_security import hash_password

router = APIRouter(prefix="/user", tags=["User Registration"])


@router.post("/register", response_model=UserCreateResponse, status_code=201)
async def register_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    user_name = data.user_name.strip()
    if len(user_name) < 3:
        raise HTTPException(400, "user_name must be at least 3 characters")

    email = data.email.lower()

    # Check if email exists
    result = await db.execute(select(User).where(User.email == email))
    if result.scalars().first():
        raise HTTPException(400, "Email already exists")

    # Self-registered accounts are always students
    user = User(
        role=UserRole.STUDENT,
        name=user_name,
        email=email,
        password_hash=hash_password(data.password),
    )

    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent request took the same email first
        await db.rollback()
        raise HTTPException(400, "Email already exists")
    await db.refresh(user)

    return UserCreateResponse(
        message="User registered successfully",
        user_id=user.id,
        role=user.role,
    )
