"""
Data models for the scoreboard server
"""
from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, List, Optional, Tuple


class Challenge(BaseModel):
    """A scored task"""
    model_config = ConfigDict(frozen=True)

    id: str
    display_number: int
    name: str
    description: Optional[str] = None
    max_score: int = 0


class Person(BaseModel):
    """A participant"""
    model_config = ConfigDict(frozen=True)

    id: str
    enrollment_number: int
    name: str


class Score(BaseModel):
    """Points of one person on one challenge (absent row = 0)"""
    model_config = ConfigDict(frozen=True)

    person_id: str
    challenge_id: str
    value: Any = 0  # stored as received; read-time coercion happens in the score index


class Snapshot(BaseModel):
    """Full backend snapshot held by the entity store"""
    model_config = ConfigDict(frozen=True)

    challenges: Tuple[Challenge, ...] = ()  # ordered by display_number
    people: Tuple[Person, ...] = ()         # ordered by enrollment_number
    scores: Tuple[Score, ...] = ()          # unordered


class ChallengeRankingEntry(BaseModel):
    person_id: str
    person_name: str
    score: int


class OverallRankingEntry(BaseModel):
    person_id: str
    person_name: str
    total: int
    max: int


class TableCell(BaseModel):
    challenge_id: str
    score: int
    max_score: int


class OverallTableRow(BaseModel):
    person_id: str
    person_name: str
    cells: List[TableCell]
    total: int


class Views(BaseModel):
    """Derived views recomputed whenever the entity store changes"""
    score_index: Dict[str, Dict[str, int]]
    per_challenge: Dict[str, List[ChallengeRankingEntry]]
    overall_ranking: List[OverallRankingEntry]
    overall_table: List[OverallTableRow]


class MutationResult(BaseModel):
    """
    Outcome of a mutation entry point

    error_kind is "validation", "not_found" or "backend" when success is False.
    """
    success: bool
    message: str = ""
    error_kind: Optional[str] = None
    entity: Optional[Dict[str, Any]] = None


class Settings(BaseModel):
    """Server configuration (see config/scoreboard.yaml)"""
    supabase_url: str = ""
    supabase_key: str = ""
    user_id: Optional[str] = None
    request_timeout: float = 12.0  # seconds per backend call
    challenges_table: str = "desafios"
    people_table: str = "pessoas"
    scores_table: str = "pontuacoes"
    roles_table: str = "app_roles"
    default_max_score: int = 100
    log_level: str = "INFO"


class CreateChallengeRequest(BaseModel):
    name: str = ""
    description: Optional[str] = ""
    max_score: Any = None  # None -> settings.default_max_score


class CreatePersonRequest(BaseModel):
    name: str = ""


class SetScoreRequest(BaseModel):
    person_id: str
    challenge_id: str
    value: Any = 0
