"""Scoreboard mutations: create/delete challenges and people, set scores"""
import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from scoreboard.models import MutationResult, Score, Settings
from scoreboard.services.backend import Backend, BackendError
from scoreboard.services.store import EntityStore
from scoreboard.utils import name_exists, next_number, to_int


logger = logging.getLogger(__name__)


class ScoreboardValidationError(ValueError):
    """Rejected locally, before any backend call"""


class NotFoundError(ScoreboardValidationError):
    """Referenced challenge or person is not in the store"""


def _clean_name(name: Optional[str], what: str, collection) -> str:
    clean_name = (name or "").strip()
    if not clean_name:
        raise ScoreboardValidationError(f"{what} name is required.")
    if name_exists(collection, clean_name):
        raise ScoreboardValidationError(f"A {what.lower()} with this name already exists.")
    return clean_name


def _failure(exc: Exception) -> MutationResult:
    if isinstance(exc, NotFoundError):
        kind = "not_found"
    elif isinstance(exc, ScoreboardValidationError):
        kind = "validation"
    else:
        kind = "backend"
    return MutationResult(success=False, message=str(exc), error_kind=kind)


class Scoreboard:
    """
    Mutation entry points over an entity store and a backend

    Every entry point returns a MutationResult instead of raising. Creates and
    deletes are followed by a full reload; when that reload fails the store is
    patched with the one confirmed change instead. Score updates patch the
    store only after the backend confirmed the upsert.

    Mutations of one server run one at a time, in the order issued. Reads
    never wait for them: they see the last store state until the mutation
    lands.
    """

    def __init__(self, store: EntityStore, backend: Backend, settings: Settings = None):
        self.store = store
        self.backend = backend
        self.settings = settings or Settings()
        self.last_error: Optional[Dict[str, str]] = None
        self._lock = asyncio.Lock()

    def _backend_failure(self, op: str, exc: BackendError) -> MutationResult:
        self.last_error = {"op": op, "message": str(exc)}
        return _failure(exc)

    # ==================== READS ====================

    def views(self):
        return self.store.views()

    def next_challenge_number(self) -> int:
        return next_number(self.store.challenges, "display_number")

    def next_enrollment_number(self) -> int:
        return next_number(self.store.people, "enrollment_number")

    async def reload(self) -> MutationResult:
        """Replace the store with a full backend snapshot"""
        async with self._lock:
            return await self._reload()

    async def _reload(self) -> MutationResult:
        try:
            snapshot = await self.backend.load_all()
        except BackendError as e:
            logger.error(f"❌ Reload failed, keeping last snapshot: {e}")
            return self._backend_failure("reload", e)
        self.store.replace(snapshot)
        return MutationResult(success=True, message="Reloaded.")

    async def _reload_or_patch(self, patch: Callable[[], None]) -> str:
        """Reload after a confirmed mutation; fall back to a local patch"""
        try:
            self.store.replace(await self.backend.load_all())
            return ""
        except BackendError as e:
            patch()
            self.last_error = {"op": "reload", "message": str(e)}
            logger.warning(f"⚠️ Reload after mutation failed ({e}); store patched locally")
            return f"Saved, but reload failed: {e}"

    # ==================== CHALLENGES ====================

    async def create_challenge(
        self,
        name: str,
        description: Optional[str] = "",
        max_score: Any = None,
    ) -> MutationResult:
        async with self._lock:
            self.last_error = None
            try:
                clean_name = _clean_name(name, "Challenge", self.store.challenges)
            except ScoreboardValidationError as e:
                logger.info(f"Challenge rejected: {e}")
                return _failure(e)

            if max_score is None:
                max_score = self.settings.default_max_score
            record = {
                # Allocated now, right before the insert, not from an earlier preview
                "display_number": self.next_challenge_number(),
                "name": clean_name,
                "description": (description or "").strip(),
                "max_score": max(0, to_int(max_score)),
            }

            try:
                created = await self.backend.insert_challenge(record)
            except BackendError as e:
                logger.error(f"❌ Failed to save challenge '{clean_name}': {e}")
                return self._backend_failure("insert:challenges", e)

            logger.info(f"✅ Challenge #{created.display_number} '{created.name}' created")
            warning = await self._reload_or_patch(lambda: self.store.add_challenge(created))
            return MutationResult(success=True, message=warning or "Challenge created.",
                                  entity=created.model_dump())

    async def delete_challenge(self, challenge_id: str) -> MutationResult:
        async with self._lock:
            self.last_error = None
            try:
                await self.backend.delete_challenge(challenge_id)
            except BackendError as e:
                logger.error(f"❌ Failed to delete challenge {challenge_id}: {e}")
                return self._backend_failure("delete:challenges", e)

            logger.info(f"🗑️ Challenge {challenge_id} deleted with its scores")
            warning = await self._reload_or_patch(lambda: self.store.remove_challenge(challenge_id))
            return MutationResult(success=True, message=warning or "Challenge deleted.")

    # ==================== PEOPLE ====================

    async def create_person(self, name: str) -> MutationResult:
        async with self._lock:
            self.last_error = None
            try:
                clean_name = _clean_name(name, "Person", self.store.people)
            except ScoreboardValidationError as e:
                logger.info(f"Person rejected: {e}")
                return _failure(e)

            record = {
                "enrollment_number": self.next_enrollment_number(),
                "name": clean_name,
            }

            try:
                created = await self.backend.insert_person(record)
            except BackendError as e:
                logger.error(f"❌ Failed to save person '{clean_name}': {e}")
                return self._backend_failure("insert:people", e)

            logger.info(f"✅ Person #{created.enrollment_number} '{created.name}' created")
            warning = await self._reload_or_patch(lambda: self.store.add_person(created))
            return MutationResult(success=True, message=warning or "Person created.",
                                  entity=created.model_dump())

    async def delete_person(self, person_id: str) -> MutationResult:
        async with self._lock:
            self.last_error = None
            try:
                await self.backend.delete_person(person_id)
            except BackendError as e:
                logger.error(f"❌ Failed to delete person {person_id}: {e}")
                return self._backend_failure("delete:people", e)

            logger.info(f"🗑️ Person {person_id} deleted")
            warning = await self._reload_or_patch(lambda: self.store.remove_person(person_id))
            return MutationResult(success=True, message=warning or "Person deleted.")

    # ==================== SCORES ====================

    async def set_score(self, person_id: str, challenge_id: str, value: Any) -> MutationResult:
        """Upsert one score, clamped to [0, challenge.max_score]"""
        async with self._lock:
            self.last_error = None
            challenge = self.store.find_challenge(challenge_id)
            if challenge is None:
                return _failure(NotFoundError(f"Challenge {challenge_id} not found."))
            if self.store.find_person(person_id) is None:
                return _failure(NotFoundError(f"Person {person_id} not found."))

            clamped = min(max(0, to_int(value)), max(0, challenge.max_score))

            try:
                await self.backend.upsert_score(person_id, challenge_id, clamped)
            except BackendError as e:
                logger.error(f"❌ Failed to save score {person_id}/{challenge_id}: {e}")
                return self._backend_failure("upsert:scores", e)

            self.store.put_score(Score(person_id=person_id, challenge_id=challenge_id, value=clamped))
            return MutationResult(
                success=True,
                message="Score saved.",
                entity={"person_id": person_id, "challenge_id": challenge_id, "value": clamped},
            )
