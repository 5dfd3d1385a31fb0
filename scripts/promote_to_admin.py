# scripts/promote_to_admin.py
# usage: python -m scripts.promote_to_admin <email>
import argparse
import asyncio

from core.database import AsyncSessionLocal, init_db
from core.exceptions import NotFoundError
from services.user import UserService


async def main(email: str) -> int:
    if not await init_db():
        print("❌ Database is not reachable")
        return 1

    async with AsyncSessionLocal() as db:
        try:
            user = await UserService(db).promote_by_email(email)
        except NotFoundError:
            print(f"❌ No user with email {email}")
            return 1

    print(f"✅ {user.email} is now an admin")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Grant the admin role to an existing user")
    parser.add_argument("email")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(main(args.email)))
