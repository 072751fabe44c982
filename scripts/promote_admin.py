"""Grant the admin role to an existing user.

Run from the project root:
    uv run python scripts/promote_admin.py someone@example.com
"""

import asyncio
import sys
from pathlib import Path

# Ensure the fitcoach package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fitcoach.db import async_session, engine
from fitcoach.models.user import UserRole
from fitcoach.services.identity import add_role, user_roles
from fitcoach.services.users import find_by_email


async def main(email: str) -> int:
    try:
        async with async_session() as session:
            user = await find_by_email(session, email)
            if user is None:
                print(f"No user with email {email}")
                return 1

            if UserRole.ADMIN in user_roles(user):
                print(f"{user.email} is already an admin")
                return 0

            roles = add_role(user, UserRole.ADMIN)
            session.add(user)
            await session.commit()
            print(f"{user.email} roles: {', '.join(r.value for r in roles)}")
    finally:
        await engine.dispose()
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: promote_admin.py EMAIL")
        raise SystemExit(2)
    raise SystemExit(asyncio.run(main(sys.argv[1])))
