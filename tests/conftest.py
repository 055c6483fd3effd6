"""
Shared fixtures: an in-memory backend double and a bound scoreboard
"""
import asyncio
from collections import Counter

import pytest

from scoreboard.models import Challenge, Person, Score, Settings, Snapshot
from scoreboard.services.backend import Backend, BackendError
from scoreboard.services.scoreboard import Scoreboard
from scoreboard.services.store import EntityStore


class InMemoryBackend(Backend):
    """Backend double that counts calls and can be told to fail or stall"""

    def __init__(self, challenges=(), people=(), scores=(), role="admin"):
        self.challenges = {c.id: c for c in challenges}
        self.people = {p.id: p for p in people}
        self.scores = {(s.person_id, s.challenge_id): s for s in scores}
        self.role = role
        self.calls = Counter()
        self.failing = set()
        self.delays = {}
        self._next_id = 0

    async def _call(self, op):
        self.calls[op] += 1
        if op in self.delays:
            await asyncio.sleep(self.delays[op])
        if op in self.failing:
            raise BackendError(f"{op} failed")

    def _new_id(self, prefix):
        self._next_id += 1
        return f"{prefix}-new-{self._next_id}"

    async def load_all(self):
        await self._call("load_all")
        return Snapshot(
            challenges=sorted(self.challenges.values(), key=lambda c: c.display_number),
            people=sorted(self.people.values(), key=lambda p: p.enrollment_number),
            scores=list(self.scores.values()),
        )

    async def insert_challenge(self, record):
        await self._call("insert_challenge")
        challenge = Challenge(id=self._new_id("c"), **record)
        self.challenges[challenge.id] = challenge
        return challenge

    async def insert_person(self, record):
        await self._call("insert_person")
        person = Person(id=self._new_id("p"), **record)
        self.people[person.id] = person
        return person

    async def delete_challenge(self, challenge_id):
        await self._call("delete_challenge")
        self.challenges.pop(challenge_id, None)
        self.scores = {k: s for k, s in self.scores.items() if k[1] != challenge_id}

    async def delete_person(self, person_id):
        await self._call("delete_person")
        self.people.pop(person_id, None)

    async def upsert_score(self, person_id, challenge_id, value):
        await self._call("upsert_score")
        self.scores[(person_id, challenge_id)] = Score(
            person_id=person_id, challenge_id=challenge_id, value=value
        )

    async def current_user_role(self):
        self.calls["current_user_role"] += 1
        return self.role


@pytest.fixture()
def scenario_backend():
    """Two challenges, two people, Bruno ahead overall and tied on c1"""
    return InMemoryBackend(
        challenges=[
            Challenge(id="c1", display_number=1, name="Quiz", max_score=100),
            Challenge(id="c2", display_number=2, name="Puzzle", max_score=50),
        ],
        people=[
            Person(id="p1", enrollment_number=1, name="Ana"),
            Person(id="p2", enrollment_number=2, name="Bruno"),
        ],
        scores=[
            Score(person_id="p1", challenge_id="c1", value=80),
            Score(person_id="p2", challenge_id="c1", value=80),
            Score(person_id="p2", challenge_id="c2", value=50),
        ],
    )


@pytest.fixture()
async def scoreboard(scenario_backend):
    """Scoreboard bound to the scenario backend, already loaded"""
    board = Scoreboard(EntityStore(), scenario_backend, Settings())
    assert (await board.reload()).success
    return board
