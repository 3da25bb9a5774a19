"""
seed_demo_club.py
-----------------
Seeds the demo club (teams, competitions, rounds, matches, friendlies)
from demo_club_config.py.

✅ Supports "delta seeding":
   - Only inserts missing records (won't overwrite existing data).
   - Safe to run multiple times.

Usage:
    python -m clubsite_backend.seed.seed_demo_club
"""

from sqlmodel import select

from clubsite_backend.core.database import get_sync_session
from clubsite_backend.core.demo_club_config import DEMO_CLUB_ID, demo_club_config
from clubsite_backend.models.competition_model import Competition, CompetitionFormat, Round
from clubsite_backend.models.match_model import FriendlyMatch, Match
from clubsite_backend.models.team_model import Team


def _existing_ids(session, model, club_id: str) -> set:
    return set(session.exec(select(model.id).where(model.club_id == club_id)).all())


def seed_teams(session, club_id: str = DEMO_CLUB_ID) -> int:
    existing = _existing_ids(session, Team, club_id)
    added = 0
    for team_data in demo_club_config["teams"]:
        if team_data["id"] in existing:
            print(f"✅ Team already exists: {team_data['name']}")
            continue
        session.add(Team(club_id=club_id, **team_data))
        added += 1
    session.commit()
    print(f"➕ Added {added} teams")
    return added


def seed_competitions(session, club_id: str = DEMO_CLUB_ID) -> int:
    """Competitions with their rounds and fixtures."""
    existing = _existing_ids(session, Competition, club_id)
    added = 0
    for comp_data in demo_club_config["competitions"]:
        if comp_data["id"] in existing:
            print(f"✅ Competition already exists: {comp_data['name']}")
            continue

        print(f"🏆 Adding competition: {comp_data['name']} ({comp_data['format']})")
        session.add(Competition(
            club_id=club_id,
            id=comp_data["id"],
            name=comp_data["name"],
            season=comp_data.get("season"),
            format=CompetitionFormat(comp_data["format"]),
            teams=list(comp_data.get("teams", [])),
            rank_labels=comp_data.get("rank_labels"),
        ))
        # Parent rows first so the round/match foreign keys resolve
        session.flush()

        for round_data in comp_data["rounds"]:
            session.add(Round(
                club_id=club_id,
                id=round_data["id"],
                competition_id=comp_data["id"],
                name=round_data["name"],
            ))
            session.flush()

            for match_id, home, away, match_date, match_time, score_home, score_away in round_data["matches"]:
                session.add(Match(
                    club_id=club_id,
                    id=match_id,
                    competition_id=comp_data["id"],
                    round_id=round_data["id"],
                    home_team=home,
                    away_team=away,
                    match_date=match_date,
                    match_time=match_time,
                    score_home=score_home,
                    score_away=score_away,
                ))
        added += 1

    session.commit()
    return added


def seed_friendly_matches(session, club_id: str = DEMO_CLUB_ID) -> int:
    existing = _existing_ids(session, FriendlyMatch, club_id)
    added = 0
    for match_id, competition_id, home, away, match_date, match_time, score_home, score_away in demo_club_config["friendly_matches"]:
        if match_id in existing:
            continue
        session.add(FriendlyMatch(
            club_id=club_id,
            id=match_id,
            competition_id=competition_id,
            home_team=home,
            away_team=away,
            match_date=match_date,
            match_time=match_time,
            score_home=score_home,
            score_away=score_away,
        ))
        added += 1
    session.commit()
    print(f"🤝 Added {added} friendly matches")
    return added


def seed_demo_club(bind=None, club_id: str = DEMO_CLUB_ID):
    print(f"🌱 Seeding demo club '{club_id}'...")
    with get_sync_session(bind) as session:
        seed_teams(session, club_id)
        seed_competitions(session, club_id)
        seed_friendly_matches(session, club_id)
    print("✅ Demo club seeded.")


if __name__ == "__main__":
    seed_demo_club()
