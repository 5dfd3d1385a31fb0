# scripts/reset_admin_password.py
# usage: python -m scripts.reset_admin_password <email> <new-password>
import argparse
import asyncio

from core.database import AsyncSessionLocal, init_db
from core.exceptions import NotFoundError, ValidationError
from services.auth_service import AuthService


async def main(email: str, new_password: str) -> int:
    if not await init_db():
        print("❌ Database is not reachable")
        return 1

    async with AsyncSessionLocal() as db:
        try:
            user = await AuthService(db).reset_password(email, new_password)
        except (NotFoundError, ValidationError) as e:
            print(f"❌ {e.message}")
            return 1

    print(f"✅ Password reset for {user.email}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Reset a user's password")
    parser.add_argument("email")
    parser.add_argument("new_password")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(main(args.email, args.new_password)))
