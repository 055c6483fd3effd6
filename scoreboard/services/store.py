"""
Entity store - in-memory mirror of the backend collections

Holds one immutable Snapshot. It is replaced wholesale on reload or patched
by exactly one element after a confirmed mutation. Derived views are
memoized per store version and recomputed lazily after any change.
"""
import logging
from typing import Optional

from scoreboard.core.ranking import build_views
from scoreboard.models import Challenge, Person, Score, Snapshot, Views


logger = logging.getLogger(__name__)


class EntityStore:
    """Current challenges, people and scores as last seen on the backend"""

    def __init__(self, snapshot: Optional[Snapshot] = None):
        self._snapshot = snapshot or Snapshot()
        self._version = 0
        self._views: Optional[Views] = None
        self._views_version = -1

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def version(self) -> int:
        return self._version

    @property
    def challenges(self):
        return self._snapshot.challenges

    @property
    def people(self):
        return self._snapshot.people

    @property
    def scores(self):
        return self._snapshot.scores

    def _set(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        self._version += 1

    def replace(self, snapshot: Snapshot) -> None:
        """Swap in a freshly loaded snapshot"""
        self._set(snapshot)
        logger.info(
            f"Store reloaded (v{self._version}): {len(snapshot.challenges)} challenges, "
            f"{len(snapshot.people)} people, {len(snapshot.scores)} scores"
        )

    def clear(self) -> None:
        """Drop everything (sign-out / shutdown)"""
        self._set(Snapshot())

    def find_challenge(self, challenge_id: str) -> Optional[Challenge]:
        return next((c for c in self._snapshot.challenges if c.id == challenge_id), None)

    def find_person(self, person_id: str) -> Optional[Person]:
        return next((p for p in self._snapshot.people if p.id == person_id), None)

    # ==================== SINGLE-ELEMENT PATCHES ====================

    def add_challenge(self, challenge: Challenge) -> None:
        challenges = sorted(
            self._snapshot.challenges + (challenge,),
            key=lambda c: c.display_number,
        )
        self._set(self._snapshot.model_copy(update={"challenges": tuple(challenges)}))

    def add_person(self, person: Person) -> None:
        people = sorted(
            self._snapshot.people + (person,),
            key=lambda p: p.enrollment_number,
        )
        self._set(self._snapshot.model_copy(update={"people": tuple(people)}))

    def remove_challenge(self, challenge_id: str) -> None:
        """Remove a challenge and cascade to its scores"""
        self._set(self._snapshot.model_copy(update={
            "challenges": tuple(c for c in self._snapshot.challenges if c.id != challenge_id),
            "scores": tuple(s for s in self._snapshot.scores if s.challenge_id != challenge_id),
        }))

    def remove_person(self, person_id: str) -> None:
        """Remove a person; their score rows stay until the next reload"""
        self._set(self._snapshot.model_copy(update={
            "people": tuple(p for p in self._snapshot.people if p.id != person_id),
        }))

    def put_score(self, score: Score) -> None:
        """Replace the row with the same (person, challenge) key, or append it"""
        key = (score.person_id, score.challenge_id)
        scores = [s for s in self._snapshot.scores if (s.person_id, s.challenge_id) != key]
        scores.append(score)
        self._set(self._snapshot.model_copy(update={"scores": tuple(scores)}))

    # ==================== DERIVED VIEWS ====================

    def views(self) -> Views:
        """Derived views for the current version (memoized)"""
        if self._views is None or self._views_version != self._version:
            self._views = build_views(self._snapshot)
            self._views_version = self._version
        return self._views
