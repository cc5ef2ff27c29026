"""Create the first superadmin account and print a bearer token for it.

Role changes otherwise require an existing superadmin, so a fresh deployment
runs this once after migrating.
"""
from __future__ import annotations

import argparse

from sqlalchemy.orm import Session

from townhall.auth.permissions import Role
from townhall.auth.roles import derived_is_admin
from townhall.core.security import create_access_token
from townhall.db.session import session_scope
from townhall.models import User
from townhall.services.users import register_user


def ensure_superadmin(db: Session, username: str, email: str | None = None) -> User:
    """Return ``username`` promoted to superadmin, creating it when missing."""
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        user = register_user(db, username=username, email=email)
        print(f"[bootstrap] created user {username}")
    user.role = Role.SUPERADMIN.value
    user.is_admin = derived_is_admin(Role.SUPERADMIN)
    db.flush()
    return user


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or promote the first superadmin")
    parser.add_argument("username")
    parser.add_argument("--email", default=None)
    args = parser.parse_args()

    with session_scope() as db:
        user = ensure_superadmin(db, args.username, args.email)
        token = create_access_token(user.id)
    print(f"[bootstrap] {args.username} is superadmin")
    print(token)


if __name__ == "__main__":
    main()
