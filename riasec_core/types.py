
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
@dataclass(frozen=True)
class ItemOption:
    id: str; position: int; code: str
    description: str = ""
@dataclass(frozen=True)
class Item:
    id: int; prompt: str
    options: Tuple[ItemOption, ...] = ()
    @property
    def question_id(self) -> str:
        return f"Q{self.id:02d}"
    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(opt.code for opt in self.options)
    @property
    def options_str(self) -> str:
        return ",".join(self.codes)
@dataclass(frozen=True)
class Candidate:
    name: str; codes: Tuple[str, ...] = ()
@dataclass(frozen=True)
class ScoredCandidate:
    name: str; codes: Tuple[str, ...]; score: float
@dataclass(frozen=True)
class ResponseDraft:
    item_id: int; question_id: str; options: str
    chosen_code: str; chosen_position: int
    response_time_sec: float = 0.0
    skipped: bool = False
@dataclass(frozen=True)
class IdentityMeta:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: Optional[str] = None
    education_level: Optional[str] = None
    favorite_subject_1: Optional[str] = None
    favorite_subject_2: Optional[str] = None
    def provided(self) -> Dict[str, str]:
        return {k: v for k, v in self.__dict__.items() if v is not None}
@dataclass(frozen=True)
class ValidatedSubmission:
    user_id: str
    responses: Tuple[ResponseDraft, ...]
    meta: IdentityMeta = field(default_factory=IdentityMeta)
    @property
    def skipped(self) -> int:
        return sum(1 for r in self.responses if r.skipped)
@dataclass
class SubmissionResult:
    user: Dict[str, Any]
    responses: List[Dict[str, Any]]
    recommendations: List[Dict[str, Any]] = field(default_factory=list)
@dataclass
class Confirmation:
    user_id: str; chosen_major: str; satisfaction_score: int
