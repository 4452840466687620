import asyncio
from datetime import datetime, time, timedelta

import pytest

from kickoff_backend.models import MatchStatus, LoanStatus
from kickoff_backend.services import loan_completion_service, match_lifecycle_service
from kickoff_backend.services.loan_completion_service import (
    complete_loans_for_finished_matches, run_loan_completion_loop
)
from kickoff_backend.services.match_lifecycle_service import (
    auto_finish_matches, sweep_matches_for_date, safe_sweep, run_match_sweep_loop
)


@pytest.mark.asyncio
async def test_overdue_match_is_finished_and_its_loans_follow(db, two_teams, add_match, add_loan, now):
    home, away = two_teams
    overdue = await add_match(home, away, match_time=time(10, 0))
    later = await add_match(away, home, match_time=time(15, 30))
    loan = await add_loan(away, overdue, number_of_players=3)

    result = await auto_finish_matches(db, [overdue, later], now)

    assert result == {"checked": 2, "finished": 1, "match_ids": [overdue.id]}
    assert overdue.status == MatchStatus.FINISHED
    assert later.status == MatchStatus.NOT_STARTED

    # The sweep leaves loans alone; the cascade picks them up on its own pass
    await db.refresh(loan)
    assert loan.status == LoanStatus.PENDING

    cascade = await complete_loans_for_finished_matches(db)
    assert cascade == {"completed_loans": 1, "loan_ids": [loan.id]}
    await db.refresh(loan)
    assert loan.status == LoanStatus.COMPLETED


@pytest.mark.asyncio
async def test_sweep_and_cascade_are_idempotent(db, two_teams, add_match, add_loan, now):
    home, away = two_teams
    match = await add_match(home, away, match_time=time(10, 0), status=MatchStatus.LIVE)
    await add_loan(home, match)

    first = await auto_finish_matches(db, [match], now)
    second = await auto_finish_matches(db, [match], now)
    assert first["finished"] == 1
    assert second == {"checked": 1, "finished": 0, "match_ids": []}

    assert (await complete_loans_for_finished_matches(db))["completed_loans"] == 1
    assert await complete_loans_for_finished_matches(db) == {"completed_loans": 0, "loan_ids": []}


@pytest.mark.asyncio
async def test_running_match_is_left_alone(db, two_teams, add_match, add_loan, now):
    home, away = two_teams
    # 10:02 kick-off: 104 minutes at 11:46
    match = await add_match(home, away, match_time=time(10, 2), status=MatchStatus.HALF_TIME)
    loan = await add_loan(home, match, status=LoanStatus.ACTIVE)

    result = await auto_finish_matches(db, [match], now)
    assert result["finished"] == 0
    assert match.status == MatchStatus.HALF_TIME

    assert (await complete_loans_for_finished_matches(db))["completed_loans"] == 0
    await db.refresh(loan)
    assert loan.status == LoanStatus.ACTIVE


@pytest.mark.asyncio
async def test_manually_finished_match_completes_loans_without_a_sweep(db, two_teams, add_match, add_loan):
    home, away = two_teams
    match = await add_match(home, away, match_time=time(18, 0), status=MatchStatus.FINISHED)
    done = await add_loan(home, match, status=LoanStatus.COMPLETED)
    open_loan = await add_loan(away, match)

    result = await complete_loans_for_finished_matches(db)

    assert result == {"completed_loans": 1, "loan_ids": [open_loan.id]}
    await db.refresh(done)
    assert done.status == LoanStatus.COMPLETED


@pytest.mark.asyncio
async def test_sweep_for_date_only_checks_that_day(db, two_teams, add_match, now, today):
    home, away = two_teams
    todays = await add_match(home, away, match_time=time(9, 0))
    yesterdays = await add_match(away, home, match_time=time(9, 0), match_date=today - timedelta(days=1))

    result = await sweep_matches_for_date(db, today, now)

    assert result["checked"] == 1
    assert result["match_ids"] == [todays.id]
    await db.refresh(yesterdays)
    assert yesterdays.status == MatchStatus.NOT_STARTED


@pytest.mark.asyncio
async def test_safe_sweep_swallows_failures(db, now):
    assert await safe_sweep(db, [object()], now) is None


@pytest.mark.asyncio
async def test_background_sweep_finishes_late_kick_off_after_midnight(db, two_teams, add_match, add_loan, today):
    home, away = two_teams
    yesterday = today - timedelta(days=1)
    late = await add_match(home, away, match_date=yesterday, match_time=time(23, 0), status=MatchStatus.LIVE)
    await add_match(away, home, match_date=yesterday, match_time=time(15, 0), status=MatchStatus.FINISHED)
    await add_match(away, home, match_date=today + timedelta(days=1))
    loan = await add_loan(away, late)

    # 02:00 the next day: 180 minutes after kick-off
    result = await sweep_matches_for_date(db, None, datetime.combine(today, time(2, 0)))

    assert result == {"checked": 1, "finished": 1, "match_ids": [late.id]}
    assert late.status == MatchStatus.FINISHED

    assert (await complete_loans_for_finished_matches(db))["loan_ids"] == [loan.id]


@pytest.mark.asyncio
async def test_match_sweep_loop_survives_a_failed_cycle(monkeypatch, capsys):
    calls = []
    recovered = asyncio.Event()

    async def flaky_sweep():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("database is locked")
        recovered.set()
        return {"checked": 1, "finished": 1, "match_ids": [7]}

    monkeypatch.setattr(match_lifecycle_service, "trigger_match_sweep", flaky_sweep)

    task = asyncio.create_task(run_match_sweep_loop(0))
    await asyncio.wait_for(recovered.wait(), timeout=2)
    assert not task.done()

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    out = capsys.readouterr().out
    assert "Match sweep error: database is locked" in out
    assert "1 of 1 matches set to FT [7]" in out


@pytest.mark.asyncio
async def test_loan_completion_loop_survives_a_failed_cycle(monkeypatch, capsys):
    calls = []
    recovered = asyncio.Event()

    async def flaky_completion():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("database is locked")
        recovered.set()
        return {"completed_loans": 2, "loan_ids": [3, 4]}

    monkeypatch.setattr(loan_completion_service, "trigger_loan_completion", flaky_completion)

    task = asyncio.create_task(run_loan_completion_loop(0))
    await asyncio.wait_for(recovered.wait(), timeout=2)
    assert not task.done()

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    out = capsys.readouterr().out
    assert "Loan completion error: database is locked" in out
    assert "2 loans completed [3, 4]" in out
