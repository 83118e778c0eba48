import asyncio
from getpass import getpass
from sqlalchemy import select
from app.database import AsyncSessionLocal
from app.models import User, UserRole
from app.auth.password_security import hash_password


async def create_teacher_interactive():
    """
    Interactively create an instructor account, the only role allowed to author quizzes.
    """
    email = input("Enter teacher email: ").strip().lower()
    name = input("Enter teacher name: ").strip()
    password = getpass("Enter teacher password: ").strip()
    password_confirm = getpass("Confirm password: ").strip()

    if not name:
        print("Name is required. Exiting.")
        return

    if password != password_confirm:
        print("Passwords do not match. Exiting.")
        return

    async with AsyncSessionLocal() as session:
        existing = await session.execute(select(User).where(User.email == email))
        if existing.scalars().first():
            print(f"User with email {email} already exists.")
            return

        teacher = User(
            role=UserRole.INSTRUCTOR,
            email=email,
            name=name,
            password_hash=hash_password(password)
        )
        session.add(teacher)
        await session.commit()
        print(f"Teacher created successfully: {email} ({teacher.id})")


if __name__ == "__main__":
    asyncio.run(create_teacher_interactive())
