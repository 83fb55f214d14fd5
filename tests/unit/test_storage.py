"""Tests for the SQLite stores."""
from __future__ import annotations

import sqlite3

import pytest

from contracts import ChatMessage, InterviewState
from storage import (
    BulletStore,
    JobDraftStore,
    PositionStore,
    RecordNotFound,
    RunStore,
    SessionStore,
    reset_account_data,
)


def _position(store: PositionStore, **overrides):
    data = {"user_id": "u1", "company": "Acme", "title": "Engineer", "start_date": "2021-01"}
    data.update(overrides)
    return store.create_position(**data)


def test_position_dates_are_normalized(db):
    record = _position(PositionStore(db), end_date="2023-06")
    assert record.start_date == "2021-01-01"
    assert record.end_date == "2023-06-01"


def test_positions_sort_recent_first_with_undated_last(db):
    store = PositionStore(db)
    _position(store, company="Old", start_date="2015-01")
    _position(store, company="Undated", start_date=None)
    _position(store, company="New", start_date="2022-03")

    assert [p.company for p in store.list_positions("u1")] == ["New", "Old", "Undated"]
    assert store.list_positions("someone-else") == []


def test_find_position_ignores_case(db):
    store = PositionStore(db)
    created = _position(store)
    assert store.find_position("u1", "acme", "ENGINEER").id == created.id
    assert store.find_position("u2", "Acme", "Engineer") is None


def test_find_position_folds_whitespace_and_unicode_case(db):
    store = PositionStore(db)
    created = _position(store, company="Überbank", title="Backend Engineer")

    assert store.find_position("u1", "ÜBERBANK", "backend   engineer").id == created.id
    assert store.find_position("u1", "  überbank ", "Backend\tEngineer").id == created.id
    assert store.find_position("u1", "Uberbank", "Backend Engineer") is None


def test_update_position_touches_fields(db):
    store = PositionStore(db)
    created = _position(store)
    updated = store.update_position(created.id, location="Remote", end_date="2024-02")
    assert updated.location == "Remote"
    assert updated.end_date == "2024-02-01"
    with pytest.raises(RecordNotFound):
        store.update_position("missing", location="x")


def test_deleting_position_cascades_to_bullets(db):
    positions, bullets = PositionStore(db), BulletStore(db)
    record, ids = positions.create_position_with_bullets(
        {"user_id": "u1", "company": "Acme", "title": "Engineer"},
        [{"original_text": "Shipped the billing rewrite", "current_text": "Shipped the billing rewrite"}],
    )
    assert len(ids) == 1
    positions.delete_position(record.id)
    assert bullets.get_bullet(ids[0]) is None


def test_position_with_bullets_is_atomic(db):
    positions = PositionStore(db)
    with pytest.raises(Exception):
        positions.create_position_with_bullets(
            {"user_id": "u1", "company": "Acme", "title": "Engineer"},
            [{"original_text": "", "current_text": ""}],
        )
    assert positions.list_positions("u1") == []


def test_bullets_carry_position_context_and_edit_flag(db):
    position = _position(PositionStore(db))
    store = BulletStore(db)
    bullet = store.create_bullet(
        user_id="u1",
        position_id=position.id,
        original_text="Cut costs by 20%",
        current_text="Cut costs by 20%",
        hard_skills=["AWS"],
        metrics={"value": "20%", "type": "cost"},
    )

    listed = store.list_bullets("u1")
    assert listed[0].position.company == "Acme"
    assert listed[0].hard_skills == ["AWS"]
    assert listed[0].metrics == {"value": "20%", "type": "cost"}

    updated = store.update_bullet(bullet.id, category="Cost")
    assert updated.was_edited is False
    updated = store.update_bullet(bullet.id, current_text="Cut AWS costs by 20%")
    assert updated.was_edited is True
    assert updated.original_text == "Cut costs by 20%"


def test_draft_lifecycle(db):
    store = BulletStore(db)
    draft = store.create_draft_bullet(user_id="u1", original_text="Draft bullet text", current_text="Draft bullet text")
    other = store.create_draft_bullet(user_id="u1", original_text="Another draft", current_text="Another draft")
    assert draft.is_draft

    assert store.list_bullets("u1", include_drafts=False) == []
    assert store.finalize_draft_bullets([draft.id]) == 1
    assert store.finalize_draft_bullets([]) == 0
    assert store.delete_orphaned_drafts("u1") == 1
    assert store.get_bullet(other.id) is None
    assert [b.id for b in store.list_bullets("u1", include_drafts=False)] == [draft.id]


def test_embedding_is_stored_as_vector_text(db, tmp_db):
    store = BulletStore(db)
    bullet = store.create_bullet(user_id="u1", original_text="Some bullet", current_text="Some bullet")
    store.set_embedding(bullet.id, [0.5, -1.0])

    with sqlite3.connect(tmp_db) as conn:
        assert conn.execute("SELECT embedding FROM bullets WHERE id = ?", (bullet.id,)).fetchone() == ("[0.5,-1.0]",)
    with pytest.raises(RecordNotFound):
        store.set_embedding("missing", [1.0])


def test_runs_round_trip_json_fields(db):
    store = RunStore(db)
    store.insert_run(user_id="u1", type="embed", model="m", input={"text": "hi"}, output={"dimensions": 3}, success=True)
    store.insert_run(user_id="u1", type="speak", success=False, output={"error": "boom"})

    runs = store.recent_runs("u1")
    assert len(runs) == 2
    embeds = store.runs_by_type("u1", "embed")
    assert embeds[0].input == {"text": "hi"}
    assert embeds[0].success is True
    with pytest.raises(ValueError):
        store.insert_run(user_id="u1", type="unknown", success=True)


def test_sessions_save_and_reload_state(db):
    store = SessionStore(db)
    state = InterviewState(messages=[ChatMessage.create("assistant", "Hi", message_id="initial")])
    first = store.save_session("s1", "u1", state)
    state.status = "completed"
    second = store.save_session("s1", "u1", state)

    assert second.created_at == first.created_at
    loaded = store.load_session("s1")
    assert loaded.state.status == "completed"
    assert loaded.state.messages[0].id == "initial"
    assert store.load_session("missing") is None
    assert [s.session_id for s in store.list_sessions("u1")] == ["s1"]


def test_account_reset_only_touches_owner(db):
    _position(PositionStore(db))
    _position(PositionStore(db), user_id="u2")
    RunStore(db).insert_run(user_id="u1", type="interview", success=True)
    SessionStore(db).save_session("s1", "u1", InterviewState())
    JobDraftStore(db).create_job_draft(user_id="u1", jd_text="Staff engineer at Initech")

    deleted = reset_account_data(db, "u1")

    assert deleted == {"job_drafts": 1, "bullets": 0, "positions": 1, "runs": 1, "interview_sessions": 1}
    assert PositionStore(db).list_positions("u1") == []
    assert len(PositionStore(db).list_positions("u2")) == 1


def _embedded_bullet(bullets: BulletStore, text: str, vector, *, user_id="u1", is_draft=False):
    create = bullets.create_draft_bullet if is_draft else bullets.create_bullet
    record = create(user_id=user_id, original_text=text, current_text=text)
    bullets.set_embedding(record.id, vector)
    return record


def test_match_bullets_ranks_by_similarity(db):
    bullets = BulletStore(db)
    close = _embedded_bullet(bullets, "Scaled the payments API to 10k rps", [1.0, 0.1])
    near = _embedded_bullet(bullets, "Mentored four junior engineers", [0.6, 0.8])
    _embedded_bullet(bullets, "Organized the office move", [-1.0, 0.0])
    _embedded_bullet(bullets, "Draft bullet not yet confirmed", [1.0, 0.0], is_draft=True)
    _embedded_bullet(bullets, "Another user's bullet text", [1.0, 0.0], user_id="u2")
    _embedded_bullet(bullets, "Embedded with another model", [1.0, 0.0, 0.0])
    bullets.create_bullet(user_id="u1", original_text="Never embedded bullet", current_text="Never embedded bullet")

    matches = bullets.match_bullets("u1", [1.0, 0.0], count=50, threshold=0.3)

    assert [m.id for m in matches] == [close.id, near.id]
    assert matches[0].similarity > matches[1].similarity >= 0.3
    assert [m.id for m in bullets.match_bullets("u1", [1.0, 0.0], count=1)] == [close.id]
    assert bullets.match_bullets("u1", [1.0, 0.0], threshold=0.99) != []
    assert bullets.match_bullets("u1", [0.0, -1.0], threshold=0.3) == []


def test_job_draft_lifecycle(db):
    bullets, drafts = BulletStore(db), JobDraftStore(db)
    first = _embedded_bullet(bullets, "Scaled the payments API to 10k rps", [1.0, 0.0])
    second = _embedded_bullet(bullets, "Mentored four junior engineers", [0.0, 1.0])

    draft = drafts.create_job_draft(
        user_id="u1",
        jd_text="Backend Engineer\nJoin us at Initech",
        job_title="Backend Engineer",
        embedding=[0.5, 0.5],
        retrieved_bullet_ids=[second.id, first.id],
        selected_bullet_ids=[second.id],
    )

    assert draft.jd_embedding == "[0.5,0.5]"
    assert [d.id for d in drafts.list_job_drafts("u1")] == [draft.id]
    assert drafts.list_job_drafts("u2") == []
    loaded = drafts.get_job_draft_with_bullets(draft.id, bullets)
    assert [b.id for b in loaded.bullets] == [second.id]

    updated = drafts.update_selected_bullets(draft.id, [first.id, second.id])
    assert updated.selected_bullet_ids == [first.id, second.id]
    assert [b.id for b in drafts.get_job_draft_with_bullets(draft.id, bullets).bullets] == [first.id, second.id]
    with pytest.raises(RecordNotFound):
        drafts.update_selected_bullets("missing", [])

    drafts.delete_job_draft(draft.id)
    assert drafts.get_job_draft(draft.id) is None
    assert drafts.get_job_draft_with_bullets(draft.id, bullets) is None


def test_job_draft_without_selection_shows_retrieved_bullets(db):
    bullets, drafts = BulletStore(db), JobDraftStore(db)
    bullet = _embedded_bullet(bullets, "Scaled the payments API to 10k rps", [1.0, 0.0])
    draft = drafts.create_job_draft(user_id="u1", jd_text="Platform role", retrieved_bullet_ids=[bullet.id, "gone"])

    assert [b.id for b in drafts.get_job_draft_with_bullets(draft.id, bullets).bullets] == [bullet.id]
