from __future__ import annotations

import argparse
import secrets
import string
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from jobboard.config import build_sqlalchemy_db_url, settings  # noqa: E402
from jobboard.database import Base, SessionLocal, engine  # noqa: E402
from jobboard.models.user import User, UserRole  # noqa: E402
from jobboard.utils.password_hash import hash_password  # noqa: E402
import jobboard.models  # noqa: F401,E402  # ensure all models are registered


def _ensure_tables() -> None:
    db_url = build_sqlalchemy_db_url(settings)
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


def _generate_password(length: int = 20) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Create (or promote) a local company account that can post vacancies."
    )
    parser.add_argument("--username", required=True, help="Login name of the company account")
    parser.add_argument("--password", default=None, help="Account password (generated if omitted)")
    parser.add_argument(
        "--update-password",
        action="store_true",
        help="If the user exists, overwrite their password",
    )

    args = parser.parse_args(argv)

    _ensure_tables()

    password = args.password or _generate_password()

    with SessionLocal() as db:
        user = db.query(User).filter(User.username == args.username).first()
        if user is None:
            user = User(username=args.username, password_hash=hash_password(password), role=UserRole.COMPANY.value)
            db.add(user)
            db.commit()
            db.refresh(user)
            created = True
        else:
            created = False
            if user.role != UserRole.COMPANY.value:
                user.role = UserRole.COMPANY.value
                sys.stderr.write(f"promoted user id={user.id} to company\n")
            if args.update_password:
                user.password_hash = hash_password(password)
            db.add(user)
            db.commit()

    if created:
        # Print the password so the operator can log in immediately.
        print(f"created company id={user.id} username={args.username}")
        if args.password is None:
            print(f"generated password: {password}")
    else:
        print(f"user already exists username={args.username}")
        if args.update_password:
            print("password updated")
        elif args.password is None:
            print("(password not changed)")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
