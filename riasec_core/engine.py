# riasec_core/engine.py
from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Sequence
import logging

from .config import ITEM_COUNT, PREVIEW_LIMIT_DEFAULT, PREVIEW_LIMIT_MAX, SCORE_DECIMALS, TOP_N_PERSISTED
from .errors import (
    AlreadyCompleted,
    AlreadyConfirmedSame,
    CandidateNotRecommended,
    ConfirmationImmutable,
    IdentityNotFound,
    InvalidMetadata,
    PipelineError,
    ResponseCountMismatch,
)
from .question_bank import load_catalog, load_items
from .ranking import normalize_profile, rank_candidates
from .scoring import empty_scores, score_and_profile
from .storage import AssessmentStore, Transaction, utcnow_iso
from .txqueue import WriteQueue
from .types import Candidate, Confirmation, Item, SubmissionResult, ValidatedSubmission
from .validators import (
    assert_major_name,
    assert_satisfaction,
    assert_user_id,
    validate_submission,
)

log = logging.getLogger(__name__)

DEFAULT_FIRST_NAME = "Anonymous"
DEFAULT_LAST_NAME = "User"


def _response_rows(submission: ValidatedSubmission) -> List[Dict[str, Any]]:
    return [
        {
            "response_id": f"{submission.user_id}_{r.question_id}",
            "question_id": r.question_id,
            "options": r.options,
            "chosen_code": r.chosen_code,
            "chosen_position": r.chosen_position,
            "response_time_sec": r.response_time_sec,
        }
        for r in submission.responses
    ]


def _public_recommendation(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "major_name": row["major_name"],
        "rank": row["recommendation_rank"],
        "score": row["recommendation_score"],
    }


class AssessmentService:
    """Write paths (submit, confirm) and read paths (profile, preview).

    Writes go through one ``WriteQueue`` so the "already completed" gate and
    the recommendation insert of a submission can never interleave with
    another write.
    """

    def __init__(
        self,
        store: AssessmentStore,
        items: Optional[Sequence[Item]] = None,
        catalog: Optional[Sequence[Candidate]] = None,
        queue: Optional[WriteQueue] = None,
        top_n: int = TOP_N_PERSISTED,
        preview_default: int = PREVIEW_LIMIT_DEFAULT,
        preview_max: int = PREVIEW_LIMIT_MAX,
    ) -> None:
        self.store = store
        self.items: tuple[Item, ...] = tuple(items if items is not None else load_items())
        self.catalog: tuple[Candidate, ...] = tuple(catalog if catalog is not None else load_catalog())
        self.queue = queue or WriteQueue()
        self.top_n = top_n
        self.preview_default = preview_default
        self.preview_max = preview_max

    @classmethod
    def from_config(cls, store: AssessmentStore, cfg: Mapping[str, Any], **kwargs: Any) -> "AssessmentService":
        return cls(
            store,
            top_n=int(cfg.get("TOP_N_PERSISTED", TOP_N_PERSISTED)),
            preview_default=int(cfg.get("PREVIEW_LIMIT_DEFAULT", PREVIEW_LIMIT_DEFAULT)),
            preview_max=int(cfg.get("PREVIEW_LIMIT_MAX", PREVIEW_LIMIT_MAX)),
            **kwargs,
        )

    # ---- submission ----
    async def submit(
        self,
        user_id: Any,
        answers: Optional[Mapping[Any, Any]],
        response_times: Optional[Mapping[Any, Any]] = None,
        meta: Optional[Mapping[str, Any]] = None,
    ) -> SubmissionResult:
        uid = assert_user_id(user_id)
        try:
            return await self.queue.run(lambda: self._submit_unit(uid, answers, response_times, meta))
        except PipelineError as exc:
            if exc.defensive:
                log.error("submission for %s rolled back: %s", uid, exc)
            raise

    def _submit_unit(
        self,
        user_id: str,
        answers: Optional[Mapping[Any, Any]],
        response_times: Optional[Mapping[Any, Any]],
        meta: Optional[Mapping[str, Any]],
    ) -> SubmissionResult:
        with self.store.transaction(user_id) as tx:
            if tx.has_recommendations():
                log.debug("submission rejected, %s already completed", user_id)
                raise AlreadyCompleted()

            submission = validate_submission(user_id, self.items, answers, response_times, meta)
            provided = submission.meta.provided()
            if tx.get_user() is None:
                tx.create_user(
                    {
                        "first_name": provided.get("first_name", DEFAULT_FIRST_NAME),
                        "last_name": provided.get("last_name", DEFAULT_LAST_NAME),
                        "scores": empty_scores(),
                        "riasec_profile": None,
                    }
                )

            tx.delete_responses()
            stored = tx.insert_responses(_response_rows(submission))
            if len(stored) != ITEM_COUNT:
                raise ResponseCountMismatch(f"Expected {ITEM_COUNT} inserted item responses, inserted {len(stored)}")

            scores, profile = score_and_profile(tx.list_responses())
            ranked = rank_candidates(profile, self.catalog, self.top_n)

            tx.update_user(dict(provided, scores=scores, riasec_profile=profile, completed_at=utcnow_iso()))

            tx.delete_recommendations()
            for rank, entry in enumerate(ranked, start=1):
                tx.insert_recommendation(entry.name, rank, round(entry.score, SCORE_DECIMALS))

            user = tx.get_user()
            recs = [_public_recommendation(r) for r in tx.list_recommendations()]

        log.info(
            "submission stored user=%s profile=%s skipped=%d recommendations=%d",
            user_id, profile, submission.skipped, len(recs),
        )
        return SubmissionResult(user=user or {}, responses=stored, recommendations=recs)

    # ---- outcome confirmation ----
    async def confirm(self, user_id: Any, chosen_major: Any, satisfaction_score: Any) -> Confirmation:
        uid = assert_user_id(user_id)
        major = assert_major_name(chosen_major)
        rating = assert_satisfaction(satisfaction_score)
        return await self.queue.run(lambda: self._confirm_unit(uid, major, rating))

    def _confirm_unit(self, user_id: str, major: str, rating: int) -> Confirmation:
        with self.store.transaction(user_id) as tx:
            user = tx.get_user()
            if user is None:
                raise IdentityNotFound(user_id)
            current = user.get("chosen_major")
            if current:
                if current == major:
                    raise AlreadyConfirmedSame(major)
                raise ConfirmationImmutable(current)
            if major not in {r["major_name"] for r in tx.list_recommendations()}:
                raise CandidateNotRecommended(major)

            tx.update_user({"chosen_major": major, "satisfaction_score": rating, "confirmed_at": utcnow_iso()})
            _ensure_ranked(tx, major)
            tx.raise_score_floor(major, float(rating))

        log.info("major confirmed user=%s major=%s rating=%d", user_id, major, rating)
        return Confirmation(user_id=user_id, chosen_major=major, satisfaction_score=rating)

    # ---- reads ----
    def read_profile(self, user_id: Any) -> Dict[str, Any]:
        uid = assert_user_id(user_id)
        doc = self.store.read(uid)
        user = doc.get("user")
        if not user:
            raise IdentityNotFound(uid)
        recs = sorted(doc.get("recommendations") or [], key=lambda r: r["recommendation_rank"])
        return {
            "user_id": uid,
            "first_name": user.get("first_name"),
            "last_name": user.get("last_name"),
            "gender": user.get("gender"),
            "education_level": user.get("education_level"),
            "favorite_subject_1": user.get("favorite_subject_1"),
            "favorite_subject_2": user.get("favorite_subject_2"),
            "scores": user.get("scores") or empty_scores(),
            "riasec_profile": user.get("riasec_profile"),
            "chosen_major": user.get("chosen_major"),
            "satisfaction_score": user.get("satisfaction_score"),
            "recommendations": [_public_recommendation(r) for r in recs],
            "completed": bool(recs),
        }

    def read_responses(self, user_id: Any) -> List[Dict[str, Any]]:
        uid = assert_user_id(user_id)
        doc = self.store.read(uid)
        if not doc.get("user"):
            raise IdentityNotFound(uid)
        return sorted(doc.get("responses") or [], key=lambda r: r["question_id"])

    def preview(self, profile: Any, limit: Optional[int] = None) -> Dict[str, Any]:
        """Rank without persisting anything; limit clamped to the preview max."""
        cleaned = normalize_profile(profile)
        if not cleaned:
            raise InvalidMetadata("profile must contain RIASEC letters")
        n = int(limit) if limit is not None and int(limit) >= 1 else self.preview_default
        n = max(1, min(n, self.preview_max, len(self.catalog) or 1))
        ranked = rank_candidates(cleaned, self.catalog, n)
        return {
            "profile": cleaned,
            "recommendations": [{"major": c.name, "code": list(c.codes), "score": c.score} for c in ranked],
        }


def _ensure_ranked(tx: Transaction, major: str) -> None:
    # normally already ranked; appended at the next free rank otherwise
    tx.insert_recommendation(major, tx.next_rank(), 0.0, or_ignore=True)
