"""
FastAPI main application
Scoreboard Server - challenges, people, scores and rankings

Modular architecture with separated API routers in scoreboard/api/:
- health.py: Health check and store status
- config.py: Non-secret configuration and current role
- leaderboard.py: Entities, score index and the ranking views
- admin.py: Create/delete challenges and people, set scores, reload

All routers access shared state via scoreboard.state module.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from scoreboard import state
from scoreboard.config import load_config
from scoreboard.models import Settings
from scoreboard.services.backend import Backend, SupabaseBackend
from scoreboard.services.scoreboard import Scoreboard
from scoreboard.services.store import EntityStore

# Import all API routers
from scoreboard.api import health, admin, leaderboard
from scoreboard.api import config as config_router


# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def init_state(settings: Settings, backend: Backend) -> Scoreboard:
    """Bind settings, a fresh store and the backend into global state"""
    state.SETTINGS = settings
    state.BACKEND = backend
    state.STORE = EntityStore()
    state.SCOREBOARD = Scoreboard(state.STORE, backend, settings)
    state.ROLE = await backend.current_user_role()
    return state.SCOREBOARD


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup: connect to the backend and mirror its data
    try:
        settings = load_config()
        logging.getLogger().setLevel(settings.log_level.upper())
        backend = await SupabaseBackend.connect(settings)
        scoreboard = await init_state(settings, backend)
    except Exception as e:
        logger.error(f"❌ Failed to start scoreboard: {e}")
        raise

    result = await scoreboard.reload()
    if result.success:
        logger.info(
            f"✅ Server started as '{state.ROLE}' with {len(state.STORE.challenges)} challenges "
            f"and {len(state.STORE.people)} people"
        )
    else:
        logger.error(f"❌ Initial load failed, starting empty: {result.message}")

    yield

    # Shutdown: the store lives only as long as the session
    state.STORE.clear()
    state.ROLE = "user"
    logger.info("🛑 Server shutting down")


# Create FastAPI app
app = FastAPI(
    title="Scoreboard Server",
    description="Challenges, participants, scores and rankings backed by Supabase",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware (allow all origins for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== INCLUDE ROUTERS ====================

# Health check (GET /)
app.include_router(health.router)

# Admin endpoints (POST /admin/challenges, PUT /admin/scores, etc.)
app.include_router(admin.router)

# Views (GET /api/challenges, /api/rankings/overall, /api/table, ...)
app.include_router(leaderboard.router)

# Config endpoint (GET /config)
app.include_router(config_router.router)


# ==================== RUN SERVER ====================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
