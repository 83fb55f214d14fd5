"""Turn a pasted job description into a job draft with matched bullets."""
from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from llm_gateway import Embedding, LlmGatewayError
from storage import BulletMatch, BulletStore, JobDraftRecord, JobDraftStore, RunStore

from .telemetry import RunLogger, truncate_text

logger = logging.getLogger(__name__)

_COMPANY = re.compile(r"(?:\bat|@|\bfor)\s+([A-Z][A-Za-z0-9\s&]+)", re.IGNORECASE)


class JobDraftResult(BaseModel):
    draft: JobDraftRecord
    matches: List[BulletMatch]


def extract_job_metadata(jd_text: str) -> Dict[str, Optional[str]]:
    """Guess a job title (first non-empty line) and company ("at X" in the first five lines)."""

    lines = [line for line in jd_text.splitlines() if line.strip()]
    job_title = lines[0].strip()[:100] if lines else None
    company = None
    for line in lines[:5]:
        found = _COMPANY.search(line)
        if found:
            company = found.group(1).strip()
            break
    return {"job_title": job_title, "company": company}


def process_job_description(
    jd_text: str,
    *,
    user_id: str,
    embed: Callable[[str], Embedding],
    bullets: BulletStore,
    drafts: JobDraftStore,
    runs: Optional[RunStore] = None,
    prompt_id: Optional[str] = None,
    match_count: int = 50,
    match_threshold: float = 0.3,
    preselect: int = 10,
    telemetry_chars: int = 500,
) -> JobDraftResult:
    """Embed ``jd_text``, rank the user's bullets against it and store a draft.

    Every match is kept as retrieved; the best ``preselect`` start out selected.
    Gateway errors are recorded as a failed embed run and re-raised.
    """
    run = RunLogger(runs, user_id, "embed", prompt_id)
    run_input = {"text": truncate_text(jd_text, telemetry_chars), "type": "jd"}
    try:
        result = embed(jd_text)
    except LlmGatewayError as exc:
        run.failure(model=prompt_id, input=run_input, error=str(exc))
        raise
    run.success(
        model=result.model,
        input=run_input,
        output={"dimensions": len(result.vector)},
        latency_ms=result.latency_ms,
        tokens_in=result.tokens,
    )

    matches = bullets.match_bullets(user_id, result.vector, count=match_count, threshold=match_threshold)
    matched_ids = [match.id for match in matches]
    draft = drafts.create_job_draft(
        user_id=user_id,
        jd_text=jd_text,
        embedding=result.vector,
        retrieved_bullet_ids=matched_ids,
        selected_bullet_ids=matched_ids[:preselect],
        **extract_job_metadata(jd_text),
    )
    logger.info("Job draft created user=%s draft=%s matches=%d", user_id, draft.id, len(matches))
    return JobDraftResult(draft=draft, matches=matches)


__all__ = ["JobDraftResult", "extract_job_metadata", "process_job_description"]
