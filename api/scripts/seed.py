"""Seed the database with the club's courts and an admin account.

Usage:
    python -m scripts.seed [--courts data/courts.json] [--admin admin@club.org]

Without --courts, the built-in COURTS list is used. Existing courts with the
same name are left alone.
"""

import argparse
import asyncio
import json
from pathlib import Path

from sqlalchemy import select

from clubhouse.core.database import async_session_factory, create_all
from clubhouse.models import Court, User, UserRole

COURTS = [
    {
        "name": "Centre Court",
        "court_type": "tennis",
        "image": "https://i.ibb.co/centre-court.jpg",
        "price": 25,
        "slots": ["07:00-08:00", "08:00-09:00", "17:00-18:00", "18:00-19:00"],
        "surface": "clay",
    },
    {
        "name": "Court 2",
        "court_type": "tennis",
        "image": "https://i.ibb.co/court-2.jpg",
        "price": 20,
        "slots": ["07:00-08:00", "08:00-09:00", "09:00-10:00"],
        "surface": "hard",
    },
    {
        "name": "Badminton Hall A",
        "court_type": "badminton",
        "image": "https://i.ibb.co/badminton-a.jpg",
        "price": 12,
        "slots": ["10:00-11:00", "11:00-12:00", "19:00-20:00"],
        "indoor": True,
    },
    {
        "name": "Squash Court 1",
        "court_type": "squash",
        "image": "https://i.ibb.co/squash-1.jpg",
        "price": 15,
        "slots": ["06:00-07:00", "12:00-13:00", "20:00-21:00"],
        "indoor": True,
    },
]

COURT_COLUMNS = {"name", "court_type", "image", "price", "slots"}


def load_courts(path: str | None) -> list[dict]:
    if path is None:
        return COURTS
    data = json.loads(Path(path).read_text())
    if not isinstance(data, list):
        raise SystemExit(f"ERROR: {path} must contain a JSON array of courts")
    return data


async def seed(courts: list[dict], admin_email: str | None) -> None:
    await create_all()

    async with async_session_factory() as db:
        existing = set((await db.execute(select(Court.name))).scalars().all())

        added = 0
        for data in courts:
            if data["name"] in existing:
                continue
            fields = {k: v for k, v in data.items() if k in COURT_COLUMNS}
            extra = {k: v for k, v in data.items() if k not in COURT_COLUMNS and k not in ("_id", "id")}
            db.add(Court(**fields, extra=extra))
            added += 1

        if admin_email:
            result = await db.execute(select(User).where(User.email == admin_email))
            admin = result.scalar_one_or_none()
            if admin is None:
                db.add(User(email=admin_email, name="Club Admin", role=UserRole.ADMIN))
            else:
                admin.role = UserRole.ADMIN

        await db.commit()

    print(f"Seeded: {added} courts ({len(courts) - added} already present)")
    if admin_email:
        print(f"  admin: {admin_email}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed courts and an admin user")
    parser.add_argument("--courts", help="JSON file with an array of courts")
    parser.add_argument("--admin", help="Email to create or promote as admin")
    parsed = parser.parse_args()
    asyncio.run(seed(load_courts(parsed.courts), parsed.admin))
