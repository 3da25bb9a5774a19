# seed_all.py
# Creates the tables and seeds the demo club, with step-by-step logging.

from sqlmodel import SQLModel

from clubsite_backend.core.database import sync_engine
from clubsite_backend.seed.seed_demo_club import seed_demo_club


def seed_all(bind=None):
    print("\n🌱 Starting full database seeding...\n")
    bind = bind if bind is not None else sync_engine

    print("➡️  Step 1: Creating tables...")
    from clubsite_backend import models  # noqa: F401
    SQLModel.metadata.create_all(bind)

    print("➡️  Step 2: Seeding demo club...")
    seed_demo_club(bind)

    print("\n✅ Database seeding complete. The public match index is built on first public read.\n")


if __name__ == "__main__":
    seed_all()
