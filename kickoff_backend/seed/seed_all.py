# seed_all.py
# Orchestrates all seed scripts to populate the database in the correct order, with detailed logging.

from sqlmodel import Session, select
from kickoff_backend.core.database import sync_engine
from kickoff_backend.models import Team
from kickoff_backend.seed.seed_teams import seed_teams
from kickoff_backend.seed.seed_matches import seed_matches


def database_is_empty() -> bool:
    with Session(sync_engine) as session:
        return session.exec(select(Team)).first() is None


def seed_all():
    print("\n🌱 Starting full database seeding...\n")

    print("➡️  Step 1: Seeding teams...")
    seed_teams()

    print("➡️  Step 2: Seeding fixtures...")
    seed_matches()

    print("\n✅ Database seeding complete. Demo teams and fixtures ready.\n")


if __name__ == "__main__":
    seed_all()
