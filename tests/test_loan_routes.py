from datetime import time

import pytest

from kickoff_backend.models import MatchStatus, LoanStatus


@pytest.mark.asyncio
async def test_create_loan_for_upcoming_match(client, two_teams, add_match):
    home, away = two_teams
    match = await add_match(home, away, match_time=time(18, 30), location="Volkswagen Arena")

    r = await client.post("/loans/", json={"team_id": away.id, "match_id": match.id, "number_of_players": 3})
    assert r.status_code == 201
    data = r.json()
    assert data["status"] == "pending"
    assert data["number_of_players"] == 3
    assert data["team"]["team_name"] == "St. Pauli"
    assert data["match"]["home_team"]["team_name"] == "Wolfsburg"
    assert data["match"]["away_team"]["team_name"] == "St. Pauli"
    assert data["match"]["location"] == "Volkswagen Arena"
    assert data["match"]["has_started"] is False
    assert data["user_id"] is None


@pytest.mark.asyncio
async def test_loan_for_started_match_is_rejected(client, two_teams, add_match):
    home, away = two_teams
    started = await add_match(home, away, match_time=time(11, 0))

    r = await client.post("/loans/", json={"team_id": home.id, "match_id": started.id, "number_of_players": 2})
    assert r.status_code == 400
    assert r.json()["detail"] == "Match has already started."


@pytest.mark.asyncio
async def test_loan_validation(client, two_teams, add_match):
    home, away = two_teams
    match = await add_match(home, away)

    r = await client.post("/loans/", json={"team_id": 999, "match_id": match.id, "number_of_players": 2})
    assert r.status_code == 400

    r = await client.post("/loans/", json={"team_id": home.id, "match_id": 999, "number_of_players": 2})
    assert r.status_code == 400

    r = await client.post("/loans/", json={"team_id": home.id, "match_id": match.id, "number_of_players": 0})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_list_loans_newest_first(client, two_teams, add_match, add_loan):
    home, away = two_teams
    match = await add_match(home, away)
    first = await add_loan(home, match)
    second = await add_loan(away, match)

    r = await client.get("/loans/")
    assert r.status_code == 200
    assert [loan["id"] for loan in r.json()] == [second.id, first.id]


@pytest.mark.asyncio
async def test_update_and_delete_loan(client, two_teams, add_match, add_loan):
    home, away = two_teams
    match = await add_match(home, away)
    loan = await add_loan(home, match, number_of_players=1)

    r = await client.patch(f"/loans/{loan.id}", json={"status": "active", "number_of_players": 4})
    assert r.status_code == 200
    assert r.json()["status"] == "active"
    assert r.json()["number_of_players"] == 4

    r = await client.delete(f"/loans/{loan.id}")
    assert r.status_code == 200
    assert (await client.get(f"/loans/{loan.id}")).status_code == 404


@pytest.mark.asyncio
async def test_moving_loan_to_started_match_is_rejected(client, two_teams, add_match, add_loan):
    home, away = two_teams
    upcoming = await add_match(home, away)
    started = await add_match(away, home, match_time=time(11, 0))
    loan = await add_loan(home, upcoming)

    r = await client.patch(f"/loans/{loan.id}", json={"match_id": started.id})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_sync_completed_only_touches_finished_matches(client, two_teams, add_match, add_loan):
    home, away = two_teams
    finished = await add_match(home, away, match_time=time(8, 0), status=MatchStatus.FINISHED)
    upcoming = await add_match(away, home)
    done = await add_loan(home, finished, status=LoanStatus.ACTIVE)
    waiting = await add_loan(away, upcoming)

    r = await client.post("/loans/sync-completed")
    assert r.status_code == 200
    assert r.json() == {"completed_loans": 1, "loan_ids": [done.id]}

    assert (await client.get(f"/loans/{done.id}")).json()["status"] == "completed"
    assert (await client.get(f"/loans/{waiting.id}")).json()["status"] == "pending"


@pytest.mark.asyncio
async def test_missing_loan_is_404(client):
    assert (await client.get("/loans/7")).status_code == 404
    assert (await client.patch("/loans/7", json={"status": "active"})).status_code == 404
    assert (await client.delete("/loans/7")).status_code == 404
