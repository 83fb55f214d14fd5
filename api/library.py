"""FastAPI routes over the stored positions, bullets, runs and account data."""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from storage import (
    BulletRecord,
    BulletWithPosition,
    PositionRecord,
    RecordNotFound,
    RunRecord,
    reset_account_data,
)

from .auth import current_user
from .deps import AppServices, get_services
from .errors import ValidationFailure
from .schemas import AccountResetResponse, BulletUpdate

router = APIRouter(prefix="/api")


def _owned_bullet(services: AppServices, bullet_id: str, user_id: str) -> BulletWithPosition:
    bullet = services.bullets.get_bullet(bullet_id)
    if bullet is None or bullet.user_id != user_id:
        raise RecordNotFound(f"bullet {bullet_id} not found")
    return bullet


@router.get("/positions", response_model=List[PositionRecord])
def list_positions(
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> List[PositionRecord]:
    return services.positions.list_positions(user_id)


@router.get("/bullets", response_model=List[BulletWithPosition])
def list_bullets(
    include_drafts: bool = Query(default=True),
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> List[BulletWithPosition]:
    return services.bullets.list_bullets(user_id, include_drafts=include_drafts)


@router.patch("/bullets/{bullet_id}", response_model=BulletRecord)
def update_bullet(
    bullet_id: str,
    req: BulletUpdate,
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> BulletRecord:
    _owned_bullet(services, bullet_id, user_id)
    updates = req.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationFailure("No bullet fields to update")
    if "current_text" in updates and updates["current_text"] is None:
        raise ValidationFailure("current_text cannot be null")
    for key in ("hard_skills", "soft_skills"):
        if key in updates and updates[key] is None:
            updates[key] = []
    return services.bullets.update_bullet(bullet_id, **updates)


@router.delete("/bullets/{bullet_id}", status_code=204, response_class=Response)
def delete_bullet(
    bullet_id: str,
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> Response:
    _owned_bullet(services, bullet_id, user_id)
    services.bullets.delete_bullet(bullet_id)
    return Response(status_code=204)


@router.get("/runs", response_model=List[RunRecord])
def list_runs(
    type: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> List[RunRecord]:
    if type:
        return services.runs.runs_by_type(user_id, type, limit)
    return services.runs.recent_runs(user_id, limit)


@router.delete("/account/data", response_model=AccountResetResponse)
def reset_account(
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> AccountResetResponse:
    return AccountResetResponse(deleted=reset_account_data(services.db, user_id))
