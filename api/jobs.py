"""FastAPI routes for job drafts built from pasted job descriptions."""
from __future__ import annotations

from functools import partial
from typing import List

from fastapi import APIRouter, Depends, Response

from config import EMBED_ROUTE
from llm_gateway import embed_text
from services import process_job_description
from storage import JobDraftRecord, JobDraftWithBullets, RecordNotFound

from .auth import current_user
from .deps import AppServices, get_services
from .errors import ValidationFailure
from .schemas import JobDraftCreated, JobDraftRequest, JobDraftSelection
from .validation import check_embed

router = APIRouter(prefix="/api")


def _owned_draft(services: AppServices, draft_id: str, user_id: str) -> JobDraftRecord:
    draft = services.job_drafts.get_job_draft(draft_id)
    if draft is None or draft.user_id != user_id:
        raise RecordNotFound(f"job draft {draft_id} not found")
    return draft


@router.post("/job-drafts", response_model=JobDraftCreated, status_code=201)
def create_job_draft(
    req: JobDraftRequest,
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> JobDraftCreated:
    cfg = services.settings
    text, _ = check_embed(req.text, "jd")
    route = services.route(EMBED_ROUTE)
    result = process_job_description(
        text,
        user_id=user_id,
        embed=partial(embed_text, cfg=route, client=services.http, max_chars=cfg.EMBED_MAX_CHARS),
        bullets=services.bullets,
        drafts=services.job_drafts,
        runs=services.runs,
        prompt_id=route.model,
        match_count=cfg.JD_MATCH_COUNT,
        match_threshold=cfg.JD_MATCH_THRESHOLD,
        preselect=cfg.JD_PRESELECT_COUNT,
        telemetry_chars=cfg.TELEMETRY_TEXT_CHARS,
    )
    return JobDraftCreated(
        draft_id=result.draft.id,
        matched_bullet_ids=result.draft.retrieved_bullet_ids,
        selected_bullet_ids=result.draft.selected_bullet_ids,
        matches=result.matches,
    )


@router.get("/job-drafts", response_model=List[JobDraftRecord])
def list_job_drafts(
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> List[JobDraftRecord]:
    return services.job_drafts.list_job_drafts(user_id)


@router.get("/job-drafts/{draft_id}", response_model=JobDraftWithBullets)
def get_job_draft(
    draft_id: str,
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> JobDraftWithBullets:
    _owned_draft(services, draft_id, user_id)
    return services.job_drafts.get_job_draft_with_bullets(draft_id, services.bullets)


@router.patch("/job-drafts/{draft_id}", response_model=JobDraftRecord)
def select_job_draft_bullets(
    draft_id: str,
    req: JobDraftSelection,
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> JobDraftRecord:
    _owned_draft(services, draft_id, user_id)
    owned = {bullet.id for bullet in services.bullets.get_bullets(req.selected_bullet_ids) if bullet.user_id == user_id}
    unknown = [bullet_id for bullet_id in req.selected_bullet_ids if bullet_id not in owned]
    if unknown:
        raise ValidationFailure(f"Unknown bullet ids: {', '.join(unknown)}")
    return services.job_drafts.update_selected_bullets(draft_id, req.selected_bullet_ids)


@router.delete("/job-drafts/{draft_id}", status_code=204, response_class=Response)
def delete_job_draft(
    draft_id: str,
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> Response:
    _owned_draft(services, draft_id, user_id)
    services.job_drafts.delete_job_draft(draft_id)
    return Response(status_code=204)
