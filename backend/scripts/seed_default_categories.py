# backend/scripts/seed_default_categories.py
# Gives every existing user the default categories they are missing.

from sqlalchemy.orm import Session

from backend.db import engine
from backend.models import User
from backend.services.category_service import seed_default_categories


def seed_all_users(session: Session) -> int:
    added = 0
    for user in session.query(User).all():
        added += seed_default_categories(session, user.id)
    session.commit()
    return added


def main(bind=None):
    with Session(bind or engine) as session:
        added = seed_all_users(session)
    print(f"Default categories seeded ({added} added).")


if __name__ == "__main__":
    main()
