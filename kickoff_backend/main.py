import asyncio
import os
from fastapi import FastAPI, Request, Depends
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from kickoff_backend.core.config import (
    AVATAR_STORAGE_DIR, MEDIA_URL_PREFIX, SEED_ON_STARTUP,
    ENABLE_BACKGROUND_SWEEPS, SWEEP_INTERVAL_SECONDS
)
from kickoff_backend.core.database import init_db, get_db
from kickoff_backend.seed.seed_all import seed_all, database_is_empty
from kickoff_backend.services.match_lifecycle_service import run_match_sweep_loop
from kickoff_backend.services.loan_completion_service import run_loan_completion_loop

# --- Routers ---
from kickoff_backend.core.auth import router as auth_router
from kickoff_backend.routes.team_routes import router as team_router
from kickoff_backend.routes.match_routes import router as match_router
from kickoff_backend.routes.loan_routes import router as loan_router

app = FastAPI(title="Kickoff")
app.state.background_tasks = []


@app.on_event("startup")
async def on_startup():
    # 1️⃣ Init DB tables async (importing the models registers every table)
    from kickoff_backend import models  # noqa: F401
    await init_db()

    # 2️⃣ Auto-seed demo data in sync mode
    if SEED_ON_STARTUP:
        if database_is_empty():
            print("🌱 No teams found. Auto-seeding database...")
            seed_all()  # ✅ Uses sync engine only
        else:
            print("✅ Database already seeded. Skipping auto-seed.")


@app.on_event("startup")
async def start_background_tasks():
    """
    Start the match auto-finish sweep and the loan completion sweep.
    The two loops are independent; loans follow their match within one interval.
    """
    if not ENABLE_BACKGROUND_SWEEPS:
        print("⏸️ Background sweeps disabled.")
        return

    app.state.background_tasks = [
        asyncio.create_task(run_match_sweep_loop(SWEEP_INTERVAL_SECONDS)),
        asyncio.create_task(run_loan_completion_loop(SWEEP_INTERVAL_SECONDS)),
    ]

    print(f"🔄 Background tasks started: Match sweep + Loan completion (every {SWEEP_INTERVAL_SECONDS}s)")


@app.on_event("shutdown")
async def stop_background_tasks():
    tasks = app.state.background_tasks
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    app.state.background_tasks = []
    if tasks:
        print("🛑 Background tasks stopped.")


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    print(f"❌ Database error on {request.method} {request.url.path}: {str(exc)}")
    return JSONResponse(status_code=503, content={"detail": "Database unavailable"})


@app.get("/")
async def read_root(db: AsyncSession = Depends(get_db)):
    # A failing query is turned into a 503 by database_error_handler
    await db.execute(text("SELECT 1"))
    return {
        "message": "Kickoff backend is running",
        "database": "ok",
        "background_tasks": len([t for t in app.state.background_tasks if not t.done()]),
    }


# Routers
app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(team_router, prefix="/teams", tags=["Teams"])
app.include_router(match_router, prefix="/matches", tags=["Matches"])
app.include_router(loan_router, prefix="/loans", tags=["Loans"])

# Uploaded avatars
os.makedirs(AVATAR_STORAGE_DIR, exist_ok=True)
app.mount(MEDIA_URL_PREFIX, StaticFiles(directory=AVATAR_STORAGE_DIR), name="media")
