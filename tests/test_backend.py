"""
Tests for the Supabase gateway, against a recording async query-builder double
"""
from types import SimpleNamespace

import httpx
import pytest
from postgrest.exceptions import APIError

from scoreboard.models import Settings
from scoreboard.services.backend import BackendError, SupabaseBackend


class FakeQuery:
    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.ops = []

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.ops.append((name, args, kwargs))
            return self
        return record

    async def execute(self):
        self.client.executed.append((self.table, self.ops))
        result = self.client.results.get(self.table, [])
        if isinstance(result, Exception):
            raise result
        return SimpleNamespace(data=result)


class FakeClient:
    def __init__(self, results=None):
        self.results = results or {}
        self.executed = []

    def table(self, name):
        return FakeQuery(self, name)


def _backend(results=None, **settings):
    client = FakeClient(results)
    return SupabaseBackend(Settings(**settings), client), client


@pytest.mark.asyncio
async def test_load_all_maps_rows():
    backend, client = _backend({
        "desafios": [{"id": 1, "numero": 1, "nome": "Quiz", "descricao": None, "pontuacao_max": 100}],
        "pessoas": [{"id": "p1", "inscricao": 4, "nome": "Ana"}],
        "pontuacoes": [{"pessoa_id": "p1", "desafio_id": 1, "score": None}],
    })
    snapshot = await backend.load_all()

    assert snapshot.challenges[0].id == "1"
    assert snapshot.challenges[0].max_score == 100
    assert snapshot.people[0].enrollment_number == 4
    assert snapshot.scores[0].challenge_id == "1"
    ops = dict(client.executed)
    assert ("order", ("numero",), {}) in ops["desafios"]
    assert ("order", ("inscricao",), {}) in ops["pessoas"]


@pytest.mark.asyncio
async def test_insert_challenge_sends_backend_columns():
    backend, client = _backend({
        "desafios": [{"id": "c9", "numero": 3, "nome": "Relay", "descricao": "", "pontuacao_max": 30}],
    })
    created = await backend.insert_challenge(
        {"display_number": 3, "name": "Relay", "description": "", "max_score": 30}
    )
    assert created.id == "c9"
    table, ops = client.executed[0]
    assert ops[0] == ("insert", ({"numero": 3, "nome": "Relay", "descricao": "", "pontuacao_max": 30},), {})


@pytest.mark.asyncio
async def test_delete_challenge_removes_scores_first():
    backend, client = _backend()
    await backend.delete_challenge("c1")
    assert [t for t, _ in client.executed] == ["pontuacoes", "desafios"]
    assert ("eq", ("desafio_id", "c1"), {}) in client.executed[0][1]


@pytest.mark.asyncio
async def test_upsert_score_on_composite_key():
    backend, client = _backend()
    await backend.upsert_score("p1", "c1", 70)
    _, ops = client.executed[0]
    assert ops[0] == (
        "upsert",
        ({"pessoa_id": "p1", "desafio_id": "c1", "score": 70},),
        {"on_conflict": "pessoa_id,desafio_id"},
    )


@pytest.mark.asyncio
async def test_api_error_becomes_backend_error():
    error = APIError({"message": "duplicate key value", "code": "23505", "hint": None, "details": None})
    backend, _ = _backend({"pessoas": error})
    with pytest.raises(BackendError, match="duplicate key value"):
        await backend.insert_person({"enrollment_number": 1, "name": "Ana"})


@pytest.mark.asyncio
async def test_timeout_becomes_backend_error():
    backend, _ = _backend({"pontuacoes": httpx.ReadTimeout("slow")})
    with pytest.raises(BackendError, match="Timeout"):
        await backend.upsert_score("p1", "c1", 1)


@pytest.mark.asyncio
async def test_current_user_role():
    backend, _ = _backend({"app_roles": [{"role": "admin"}]}, user_id="u1")
    assert await backend.current_user_role() == "admin"


@pytest.mark.asyncio
async def test_current_user_role_defaults_to_user():
    backend, _ = _backend({"app_roles": []}, user_id="u1")
    assert await backend.current_user_role() == "user"

    backend, _ = _backend({"app_roles": [{"role": "admin"}]})
    assert await backend.current_user_role() == "user"

    backend, _ = _backend({"app_roles": httpx.ConnectError("down")}, user_id="u1")
    assert await backend.current_user_role() == "user"


@pytest.mark.asyncio
async def test_missing_credentials():
    with pytest.raises(ValueError):
        await SupabaseBackend.connect(Settings())
