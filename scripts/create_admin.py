"""Create an admin account, or promote an existing account to admin (Postgres only).

Usage:
    uv run python -m scripts.create_admin <email> [password] [full_name]
If password is omitted for a new account, a random one is printed.
"""

import asyncio
import secrets
import sys

from portal.core.config import get_settings
from portal.domain.enums import Role
from portal.infrastructure.persistence import database
from portal.infrastructure.persistence.repositories import AccountRepository, ProfileRepository
from portal.infrastructure.security.password import check_password_strength


async def main() -> None:
    """Create or promote the admin identified by email."""
    if len(sys.argv) < 2:
        print(
            "Usage: uv run python -m scripts.create_admin <email> [password] [full_name]",
            file=sys.stderr,
        )
        sys.exit(1)
    email = sys.argv[1]
    password = sys.argv[2] if len(sys.argv) > 2 else None
    full_name = sys.argv[3] if len(sys.argv) > 3 else None

    get_settings()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        sys.exit(1)

    async with database.AsyncSessionLocal() as session:
        async with session.begin():
            accounts = AccountRepository(session)
            profiles = ProfileRepository(session)
            account = await accounts.get_by_email(email)
            if account is None:
                if not password:
                    password = secrets.token_urlsafe(12)
                    print(f"Password: {password}")
                check_password_strength(password)
                account = await accounts.create_account(email, password)
                print(f"Created account: {account.id} ({account.email})")
            if await profiles.get_by_id(account.id) is None:
                await profiles.create_profile(account.id, Role.ADMIN, full_name=full_name)
            else:
                await profiles.set_role(account.id, Role.ADMIN)
            print(f"Admin role set for {account.id} ({account.email})")
    await database.dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
