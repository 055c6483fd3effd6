"""
Global application state
Shared resources accessible across all modules
"""
from typing import Optional

from scoreboard.models import Settings
from scoreboard.services.backend import Backend
from scoreboard.services.scoreboard import Scoreboard
from scoreboard.services.store import EntityStore

# Loaded at startup from config/scoreboard.yaml
SETTINGS: Settings = Settings()

# In-memory mirror of the backend, lives as long as the server session
STORE: EntityStore = EntityStore()

# Backend gateway (SupabaseBackend in production)
BACKEND: Optional[Backend] = None

# Mutation entry points bound to STORE and BACKEND
SCOREBOARD: Optional[Scoreboard] = None

# Role of the configured user: "admin" | "user"
ROLE: str = "user"
