"""Create (or promote) the admin account.

Usage:
  python scripts/create_admin.py --username admin --email admin@t-learn.com --password '...'

Falls back to ADMIN_USERNAME / ADMIN_EMAIL / ADMIN_PASSWORD and DB_URL from the
environment. JWT_SECRET is not needed.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from tlearn.core.config import BootstrapSettings  # noqa: E402
from tlearn.db.base import Base  # noqa: E402
from tlearn.db.session import create_engine, create_sessionmaker  # noqa: E402
from tlearn.services.users import ensure_admin  # noqa: E402


async def _run(database_url: str, username: str, email: str, password: str) -> None:
    engine = create_engine(database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with create_sessionmaker(engine)() as db:
            user = await ensure_admin(db, username=username, email=email, password=password)
        print(f"Admin ready: id={user.id} username={user.username}")
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None, settings: BootstrapSettings | None = None) -> None:
    settings = settings or BootstrapSettings()
    ap = argparse.ArgumentParser()
    ap.add_argument("--username", default=settings.admin_username)
    ap.add_argument("--email", default=settings.admin_email)
    ap.add_argument("--password", default=settings.admin_password)
    args = ap.parse_args(argv)

    if not args.password:
        ap.error("--password (or ADMIN_PASSWORD) is required")

    logging.basicConfig(level=settings.log_level.upper())
    asyncio.run(_run(settings.database_url, args.username, args.email, args.password))


if __name__ == "__main__":
    main()
