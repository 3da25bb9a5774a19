import logging

from fastapi import FastAPI
from sqlmodel import Session, select

from clubsite_backend.core.config import AUTO_SEED_DEMO
from clubsite_backend.core.database import init_db, sync_engine
from clubsite_backend.models.competition_model import Competition

# --- Routers ---
from clubsite_backend.routes.admin_match_routes import router as admin_match_router
from clubsite_backend.routes.standings_routes import router as standings_router
from clubsite_backend.routes.public_routes import router as public_router

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")

app = FastAPI(title="Clubsite backend")


@app.on_event("startup")
async def on_startup():
    # 1️⃣ Init DB tables async
    await init_db()

    # 2️⃣ Optionally seed the demo club in sync mode
    if not AUTO_SEED_DEMO:
        return
    with Session(sync_engine) as session:
        competition_count = len(session.exec(select(Competition)).all())
    if competition_count == 0:
        print("🌱 No competitions found. Auto-seeding demo club...")
        from clubsite_backend.seed.seed_all import seed_all
        seed_all()  # ✅ Uses sync engine only
    else:
        print("✅ Database already seeded. Skipping auto-seed.")


# Routers
app.include_router(admin_match_router, prefix="/admin", tags=["Admin matches"])
app.include_router(standings_router, prefix="/admin", tags=["Standings"])
app.include_router(public_router, prefix="/public", tags=["Public"])
