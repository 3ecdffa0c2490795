"""
Create the admin account (or reset its password).

Run from backend/:
    python -m scripts.seed_admin --email admin@example.com --password admin123
"""
import argparse
import sys

from auth_utils import hash_password, normalize_email
from database import Base, SessionLocal, engine
from models import Admin


def seed_admin(db, email: str, password: str, reset_password: bool = False) -> Admin:
    email = normalize_email(email)
    admin = db.query(Admin).filter(Admin.email == email).first()

    if admin:
        if reset_password:
            admin.password_hash = hash_password(password)
            db.commit()
            print(f"[OK] Password reset for {email}")
        else:
            print(f"[INFO] Admin {email} already exists, nothing to do.")
        return admin

    admin = Admin(email=email, password_hash=hash_password(password))
    db.add(admin)
    db.commit()
    db.refresh(admin)
    print(f"[OK] Admin {email} created (id={admin.id})")
    return admin


def main(argv=None):
    ap = argparse.ArgumentParser(description="Create the storefront admin account.")
    ap.add_argument("--email", default="admin@example.com")
    ap.add_argument("--password", default="admin123")
    ap.add_argument("--reset-password", action="store_true", help="overwrite the password of an existing admin")
    args = ap.parse_args(argv)

    if not args.email.strip() or not args.password:
        print("Email and password must not be empty.", file=sys.stderr)
        return 2

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_admin(db, args.email, args.password, reset_password=args.reset_password)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
