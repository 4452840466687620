# seed_matches.py
# Seeds a day of demo fixtures (today, local time) between the demo teams.

from datetime import time, timedelta
from sqlmodel import Session, select
from kickoff_backend.core.database import sync_engine
from kickoff_backend.core.match_clock import local_now
from kickoff_backend.models import Match, Team

DEMO_FIXTURES = [
    # (home, away, league, country, kick-off, day offset)
    ("Wolfsburg", "St. Pauli", "Bundesliga", "Germany", time(15, 30), 0),
    ("FC Cologne", "Bayern Munich", "Bundesliga", "Germany", time(18, 30), 0),
    ("Napoli", "Parma", "Serie A", "Italy", time(18, 0), 0),
    ("Inter", "Lecce", "Serie A", "Italy", time(20, 45), 0),
    ("Bayern Munich", "Wolfsburg", "Bundesliga", "Germany", time(15, 30), 1),
    ("Lecce", "Napoli", "Serie A", "Italy", time(12, 30), 1),
]


def seed_matches():
    print("📅 Starting fixture seeding...")

    today = local_now().date()

    with Session(sync_engine) as session:
        teams = {team.team_name: team for team in session.exec(select(Team)).all()}

        created = 0
        for home, away, league, country, kick_off, offset in DEMO_FIXTURES:
            if home not in teams or away not in teams:
                print(f"❌ Missing team for {home} vs {away}. Run seed_teams first.")
                continue

            match_date = today + timedelta(days=offset)
            existing = session.exec(
                select(Match).where(
                    Match.home_team_id == teams[home].id,
                    Match.away_team_id == teams[away].id,
                    Match.match_date == match_date,
                )
            ).first()
            if existing:
                continue

            session.add(Match(
                home_team_id=teams[home].id,
                away_team_id=teams[away].id,
                league=league,
                country=country,
                match_date=match_date,
                match_time=kick_off,
            ))
            created += 1
            print(f"   ⚽ {home} vs {away} ({league}) on {match_date} at {kick_off.strftime('%H:%M')}")

        session.commit()

    print(f"🎉 Fixture seeding complete. {created} new matches.")


if __name__ == "__main__":
    seed_matches()
