"""
Backend gateway - the narrow interface to the system of record

Backend defines what the scoreboard needs from storage; SupabaseBackend
implements it on top of the async supabase client, so a slow backend call
never holds up other requests. Every failure is raised as BackendError with
the backend's own message.
"""
import asyncio
import logging
from typing import Any, Dict, List

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, AsyncClientOptions, acreate_client

from scoreboard.models import Challenge, Person, Score, Settings, Snapshot
from scoreboard.utils import to_int


logger = logging.getLogger(__name__)

ROLES = ("admin", "user")


class BackendError(RuntimeError):
    """A backend read/write failed (including timeouts)"""


class Backend:
    """Storage operations consumed by the scoreboard service (all awaitable)"""

    async def load_all(self) -> Snapshot:
        raise NotImplementedError

    async def insert_challenge(self, record: Dict[str, Any]) -> Challenge:
        raise NotImplementedError

    async def insert_person(self, record: Dict[str, Any]) -> Person:
        raise NotImplementedError

    async def delete_challenge(self, challenge_id: str) -> None:
        """Delete a challenge together with its score rows"""
        raise NotImplementedError

    async def delete_person(self, person_id: str) -> None:
        raise NotImplementedError

    async def upsert_score(self, person_id: str, challenge_id: str, value: int) -> None:
        raise NotImplementedError

    async def current_user_role(self) -> str:
        """'admin' or 'user'"""
        raise NotImplementedError


# ==================== ROW MAPPING ====================

def challenge_from_row(row: Dict[str, Any]) -> Challenge:
    return Challenge(
        id=str(row["id"]),
        display_number=to_int(row.get("numero")),
        name=row.get("nome") or "",
        description=row.get("descricao"),
        max_score=to_int(row.get("pontuacao_max")),
    )


def person_from_row(row: Dict[str, Any]) -> Person:
    return Person(
        id=str(row["id"]),
        enrollment_number=to_int(row.get("inscricao")),
        name=row.get("nome") or "",
    )


def score_from_row(row: Dict[str, Any]) -> Score:
    return Score(
        person_id=str(row["pessoa_id"]),
        challenge_id=str(row["desafio_id"]),
        value=row.get("score"),
    )


def challenge_to_row(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "numero": record["display_number"],
        "nome": record["name"],
        "descricao": record.get("description"),
        "pontuacao_max": record["max_score"],
    }


def person_to_row(record: Dict[str, Any]) -> Dict[str, Any]:
    return {"inscricao": record["enrollment_number"], "nome": record["name"]}


# ==================== SUPABASE ====================

class SupabaseBackend(Backend):
    """Backend stored in Supabase tables (desafios, pessoas, pontuacoes, app_roles)"""

    def __init__(self, settings: Settings, client: AsyncClient):
        self.settings = settings
        self.client = client

    @classmethod
    async def connect(cls, settings: Settings) -> "SupabaseBackend":
        """Create the async supabase client for the configured project"""
        if not settings.supabase_url or not settings.supabase_key:
            raise ValueError("supabase_url and supabase_key are required")
        client = await acreate_client(
            settings.supabase_url,
            settings.supabase_key,
            options=AsyncClientOptions(postgrest_client_timeout=settings.request_timeout),
        )
        return cls(settings, client)

    async def _execute(self, op: str, query) -> List[Dict[str, Any]]:
        """Run a query builder and return its rows"""
        try:
            response = await query.execute()
        except APIError as e:
            logger.error(f"❌ Backend {op} failed: {e.message}")
            raise BackendError(e.message or str(e)) from e
        except httpx.TimeoutException as e:
            logger.error(f"❌ Backend {op} timed out")
            raise BackendError("Timeout while calling the backend.") from e
        except httpx.HTTPError as e:
            logger.error(f"❌ Backend {op} failed: {e}")
            raise BackendError(str(e)) from e
        return response.data or []

    async def load_all(self) -> Snapshot:
        s = self.settings
        challenges, people, scores = await asyncio.gather(
            self._execute(
                "select:challenges",
                self.client.table(s.challenges_table)
                .select("id, numero, nome, descricao, pontuacao_max")
                .order("numero"),
            ),
            self._execute(
                "select:people",
                self.client.table(s.people_table).select("id, inscricao, nome").order("inscricao"),
            ),
            self._execute(
                "select:scores",
                self.client.table(s.scores_table).select("pessoa_id, desafio_id, score"),
            ),
        )
        return Snapshot(
            challenges=tuple(challenge_from_row(r) for r in challenges),
            people=tuple(person_from_row(r) for r in people),
            scores=tuple(score_from_row(r) for r in scores),
        )

    async def insert_challenge(self, record: Dict[str, Any]) -> Challenge:
        rows = await self._execute(
            "insert:challenges",
            self.client.table(self.settings.challenges_table).insert(challenge_to_row(record)),
        )
        if not rows:
            raise BackendError("Insert returned no challenge row.")
        return challenge_from_row(rows[0])

    async def insert_person(self, record: Dict[str, Any]) -> Person:
        rows = await self._execute(
            "insert:people",
            self.client.table(self.settings.people_table).insert(person_to_row(record)),
        )
        if not rows:
            raise BackendError("Insert returned no person row.")
        return person_from_row(rows[0])

    async def delete_challenge(self, challenge_id: str) -> None:
        # Scores first so no row is left pointing at a missing challenge
        await self._execute(
            "delete:scores",
            self.client.table(self.settings.scores_table).delete().eq("desafio_id", challenge_id),
        )
        await self._execute(
            "delete:challenges",
            self.client.table(self.settings.challenges_table).delete().eq("id", challenge_id),
        )

    async def delete_person(self, person_id: str) -> None:
        await self._execute(
            "delete:people",
            self.client.table(self.settings.people_table).delete().eq("id", person_id),
        )

    async def upsert_score(self, person_id: str, challenge_id: str, value: int) -> None:
        await self._execute(
            "upsert:scores",
            self.client.table(self.settings.scores_table).upsert(
                {"pessoa_id": person_id, "desafio_id": challenge_id, "score": value},
                on_conflict="pessoa_id,desafio_id",
            ),
        )

    async def current_user_role(self) -> str:
        user_id = self.settings.user_id
        if not user_id:
            return "user"
        try:
            rows = await self._execute(
                "select:roles",
                self.client.table(self.settings.roles_table)
                .select("role")
                .eq("user_id", user_id)
                .limit(1),
            )
        except BackendError:
            logger.warning(f"Could not read role for user {user_id}, defaulting to 'user'")
            return "user"
        role = rows[0].get("role") if rows else None
        return role if role in ROLES else "user"
