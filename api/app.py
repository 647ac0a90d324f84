from __future__ import annotations
from fastapi import FastAPI, HTTPException, Body, Query, Response
from pydantic import BaseModel, Field
import typing as t
from urllib.parse import quote

# ---- Engine imports ----
from riasec_core.config import load_config, RESPONSES_EXPORT_ENABLED
from riasec_core.engine import AssessmentService
from riasec_core.errors import PipelineError
from riasec_core.responses_export import to_json as responses_to_json, to_csv as responses_to_csv
from riasec_core.txqueue import WriteQueue
from riasec_core.storage import AssessmentStore, DATA_ROOT

CFG = load_config()
STORE = AssessmentStore(DATA_ROOT)
WRITE_QUEUE = WriteQueue()
SERVICE = AssessmentService.from_config(STORE, CFG, queue=WRITE_QUEUE)

app = FastAPI(title="RIASEC Major Recommendation API")


@app.get("/")
def root():
    return {"status": "ok", "service": "riasec-major-api"}

# ---- Schemas ----
class SubmitReq(BaseModel):
    user_id: str
    answers: dict[str, t.Any] = Field(default_factory=dict)
    response_times_sec: dict[str, t.Any] | None = None
    user_meta: dict[str, t.Any] | None = None

class ConfirmReq(BaseModel):
    chosen_major: str | None = None
    satisfaction_score: t.Any = None

class RecommendReq(BaseModel):
    profile: str | None = None
    limit: int | None = None

# ---- Helpers ----
def _http_error(exc: PipelineError) -> HTTPException:
    return HTTPException(exc.status, exc.to_dict())


def _serialize_item(it) -> dict[str, t.Any]:
    return {
        "id": it.id,
        "question_id": it.question_id,
        "prompt": it.prompt,
        "options": [{"id": o.id, "code": o.code, "description": o.description} for o in it.options],
    }

# ---- Health ----
@app.get("/health")
def health():
    return {
        "status": "ok",
        "items": len(SERVICE.items),
        "majors": len(SERVICE.catalog),
        "writes_waiting": WRITE_QUEUE.waiting,
    }

# ---- Catalogs ----
@app.get("/api/questions")
def questions():
    return {"total": len(SERVICE.items), "questions": [_serialize_item(it) for it in SERVICE.items]}

@app.get("/api/majors/all")
def majors():
    data = [{"major": c.name, "codes": list(c.codes)} for c in SERVICE.catalog]
    return {"total": len(data), "majors": data}

@app.post("/api/recommend")
def recommend(payload: RecommendReq = Body(...)):
    try:
        return SERVICE.preview(payload.profile, payload.limit)
    except PipelineError as exc:
        raise _http_error(exc) from exc

# ---- Write paths ----
@app.post("/api/quiz/submit")
async def submit(payload: SubmitReq):
    try:
        res = await SERVICE.submit(
            payload.user_id,
            payload.answers,
            payload.response_times_sec,
            payload.user_meta,
        )
    except PipelineError as exc:
        raise _http_error(exc) from exc
    return {"user": res.user, "responses": res.responses, "recommendations": res.recommendations}

@app.post("/api/users/{user_id}/major")
async def confirm_major(user_id: str, payload: ConfirmReq):
    try:
        conf = await SERVICE.confirm(user_id, payload.chosen_major, payload.satisfaction_score)
    except PipelineError as exc:
        raise _http_error(exc) from exc
    return {
        "user_id": conf.user_id,
        "chosen_major": conf.chosen_major,
        "satisfaction_score": conf.satisfaction_score,
    }

# ---- Reads ----
@app.get("/api/users/{user_id}/profile")
def profile(user_id: str):
    try:
        return SERVICE.read_profile(user_id)
    except PipelineError as exc:
        raise _http_error(exc) from exc


def _stored_responses(user_id: str) -> list[dict[str, t.Any]]:
    if not RESPONSES_EXPORT_ENABLED:
        raise HTTPException(404, "responses export disabled")
    try:
        return SERVICE.read_responses(user_id)
    except PipelineError as exc:
        raise _http_error(exc) from exc


@app.get("/api/users/{user_id}/responses.json")
def responses_json(user_id: str):
    rows = _stored_responses(user_id)
    return {"user_id": user_id, **responses_to_json(rows)}


@app.get("/api/users/{user_id}/responses.csv")
def responses_csv(user_id: str, download: bool = Query(True, description="Send as attachment")):
    rows = _stored_responses(user_id)
    body = responses_to_csv(rows)
    headers = {}
    if download:
        headers["Content-Disposition"] = f"attachment; filename*=UTF-8''{quote(user_id, safe='')}_responses.csv"
    return Response(content=body, media_type="text/csv", headers=headers)
