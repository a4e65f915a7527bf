"""Create a dashboard admin, or promote an existing user to admin."""
import asyncio
import getpass
import os
import sys
from sqlalchemy import select

# Add app to path
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from wonderlake.database import async_session
from wonderlake.models.user import User
from wonderlake.auth.jwt import hash_password


async def create_admin(email: str, password: str = None, first_name: str = None, last_name: str = None):
    async with async_session() as db:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user:
            user.is_admin = True
            user.is_active = True
            if password:
                user.password_hash = hash_password(password)
            print(f"Promoted existing user {email} to admin.")
        else:
            if not password:
                print("A password is required to create a new user.")
                return False
            db.add(User(
                email=email,
                password_hash=hash_password(password),
                first_name=first_name,
                last_name=last_name,
                is_admin=True,
                is_active=True,
            ))
            print(f"Created admin user {email}.")

        await db.commit()
    return True


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create or promote a dashboard admin")
    parser.add_argument("email", help="Admin email address")
    parser.add_argument("--first-name")
    parser.add_argument("--last-name")
    parser.add_argument(
        "--no-password",
        action="store_true",
        help="Promote an existing user without changing their password"
    )

    args = parser.parse_args()
    password = None if args.no_password else getpass.getpass("Password: ")

    ok = asyncio.run(create_admin(args.email, password, args.first_name, args.last_name))
    sys.exit(0 if ok else 1)
