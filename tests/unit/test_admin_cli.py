from contracts import InterviewState
from observability.admin_cli import tail_runs, tail_sessions
from storage import RunStore, SessionStore


def test_tail_runs_and_sessions(db, tmp_db):
    RunStore(db).insert_run(user_id="u1", type="interview", model="gpt-4o", success=False, latency_ms=12)
    SessionStore(db).save_session("s1", "u1", InterviewState())

    runs = tail_runs(5)
    assert len(runs) == 1
    assert "interview model=gpt-4o FAILED ms=12" in runs[0]
    assert tail_sessions(5, tmp_db)[0].endswith("s1 user=u1 status=in_progress")
