"""List registered users with a per-role summary"""

import sys
from collections import Counter

from sqlalchemy.exc import SQLAlchemyError

from examgen.database import crud
from examgen.database.database import SessionLocal


def main() -> int:
    db = SessionLocal()
    try:
        users = crud.list_users(db)
    except SQLAlchemyError as e:
        print(f"❌ Could not read users: {e}")
        return 1
    finally:
        db.close()

    if not users:
        print("No users registered yet.")
        return 0

    print(f"👥 USERS: {len(users)}\n")
    print(f"  {'EMAIL':<35} {'NAME':<25} {'ROLE':<10} REGISTERED")
    for u in users:
        registered = u.created_at.strftime("%Y-%m-%d %H:%M") if u.created_at else "-"
        print(f"  {u.email:<35} {u.name:<25} {u.role:<10} {registered}")

    print(f"\nTotal: {len(users)}")
    for role, count in sorted(Counter(u.role for u in users).items()):
        print(f"  - {role}: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
