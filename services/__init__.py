"""Application services wiring sessions, storage and telemetry together."""
from .extraction_sync import ExtractionSync
from .job_drafts import JobDraftResult, extract_job_metadata, process_job_description
from .sessions import build_completer, load_session, new_session, run_turn, stateless_step
from .telemetry import RunLogger, truncate_text

__all__ = [
    "ExtractionSync",
    "JobDraftResult",
    "RunLogger",
    "build_completer",
    "extract_job_metadata",
    "load_session",
    "new_session",
    "process_job_description",
    "run_turn",
    "stateless_step",
    "truncate_text",
]
