"""Create an ADMIN user and print a bearer token for it.

Usage:
    python -m scripts.create_admin <email> [name]
Tokens are normally issued by the identity provider; this is for bootstrap
and local development. Requires Postgres (DATABASE_URL).
"""

import asyncio
import sys

from medonboard.domain.enums import OnboardingStage, SystemRole
from medonboard.infrastructure.persistence import database
from medonboard.infrastructure.persistence.repositories import UserRepository
from medonboard.infrastructure.security.jwt import create_access_token


async def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python -m scripts.create_admin <email> [name]", file=sys.stderr)
        sys.exit(1)
    email = sys.argv[1]
    name = sys.argv[2] if len(sys.argv) > 2 else None

    database.get_engine()
    if database.AsyncSessionLocal is None:
        print("DATABASE_URL not configured", file=sys.stderr)
        sys.exit(1)

    try:
        async with database.AsyncSessionLocal() as session:
            async with session.begin():
                user = await UserRepository(session).create_user(
                    email=email,
                    name=name,
                    role=SystemRole.ADMIN.value,
                    onboarding_stage=OnboardingStage.ADMIN_ROLE.value,
                )
    finally:
        await database.dispose_engine()
    print(f"Created admin: {user.id} ({user.email})")
    print(f"Token: {create_access_token({'sub': user.id})}")


if __name__ == "__main__":
    asyncio.run(main())
