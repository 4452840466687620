"""
seed_teams.py
-------------
Seeds demo teams with captain contact details.

✅ Supports "delta seeding":
   - Only inserts teams whose name is missing.
   - Safe to run multiple times.

Usage:
    python -m kickoff_backend.seed.seed_teams
"""

from sqlmodel import Session, select
from kickoff_backend.core.database import sync_engine
from kickoff_backend.models import Team

DEMO_TEAMS = [
    # (team name, captain, captain phone)
    ("Wolfsburg", "Maximilian Arnold", "+49 5361 890 001"),
    ("St. Pauli", "Jackson Irvine", "+49 40 317 874 001"),
    ("FC Cologne", "Timo Hübers", "+49 221 716 16 001"),
    ("Bayern Munich", "Manuel Neuer", "+49 89 699 31 001"),
    ("Napoli", "Giovanni Di Lorenzo", "+39 081 509 5344"),
    ("Parma", "Enrico Delprato", "+39 0521 505 111"),
    ("Inter", "Lautaro Martínez", "+39 02 771 51"),
    ("Lecce", "Wladimiro Falcone", "+39 0832 240 211"),
]


def seed_teams():
    print("👕 Starting team seeding...")

    with Session(sync_engine) as session:
        created = 0
        for team_name, captain_name, captain_phone in DEMO_TEAMS:
            existing = session.exec(select(Team).where(Team.team_name == team_name)).first()
            if existing:
                print(f"✅ Team already exists: {team_name}")
                continue

            session.add(Team(team_name=team_name, captain_name=captain_name, captain_phone=captain_phone))
            created += 1

        session.commit()

    print(f"🎉 Team seeding complete. {created} new teams.")


if __name__ == "__main__":
    seed_teams()
