# scripts/create_admin.py
# usage: python -m scripts.create_admin [--email EMAIL] [--password PASSWORD]
import argparse
import asyncio
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import AsyncSessionLocal, init_db
from core.security import hash_password
from models.user import User, UserRole

# ========== default administrator ==========
DEFAULT_ADMIN = {
    "name": "System Administrator",
    "email": "admin@floodalert.com",
    "password": "admin123456",
    "phone_number": "+94771234567",
    "location": {"lat": 6.9271, "lng": 79.8612, "address": "Colombo, Sri Lanka"},
}


async def create_admin(
        db: AsyncSession,
        email: str = DEFAULT_ADMIN["email"],
        password: str = DEFAULT_ADMIN["password"],
) -> Optional[User]:
    """Returns the new admin, or None when the email is already taken."""
    email = email.lower()
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        return None

    admin = User(
        name=DEFAULT_ADMIN["name"],
        email=email,
        hashed_password=hash_password(password),
        role=UserRole.ADMIN,
        phone_number=DEFAULT_ADMIN["phone_number"],
        location=DEFAULT_ADMIN["location"],
        is_safe=True,
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    return admin


async def main(email: str, password: str) -> int:
    if not await init_db():
        print("❌ Database is not reachable")
        return 1

    async with AsyncSessionLocal() as db:
        admin = await create_admin(db, email, password)

    if admin is None:
        print(f"⚠️  User {email} already exists; use reset_admin_password to change its password")
        return 0

    print("✅ Admin user created")
    print(f"📧 Email: {admin.email}")
    print(f"🔑 Password: {password}")
    print("⚠️  Change the password after first login!")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the default administrator account")
    parser.add_argument("--email", default=DEFAULT_ADMIN["email"])
    parser.add_argument("--password", default=DEFAULT_ADMIN["password"])
    args = parser.parse_args()
    raise SystemExit(asyncio.run(main(args.email, args.password)))
