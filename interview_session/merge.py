"""Apply one turn's extraction to the session snapshot.

Positions are matched on (company, title), ignoring case and repeated whitespace:

* same as the position at the current index: its non-null fields are updated;
* same as an earlier position: the index moves back to it and nothing is appended,
  so a revisited role never gets a second entry;
* otherwise the position is appended and the index moves to it.

Bullets always land on the position at the current index. Bullets that arrive before
any position exists wait in ``pending_bullets`` and attach to the first position.
The snapshot is rebuilt each turn, so earlier positions are never dropped.
"""
from __future__ import annotations

from typing import List, Optional

from contracts import Bullet, InterviewOutput, InterviewState, Position, PositionWithBullets, StepResponse


def merge_step(state: InterviewState, step: StepResponse) -> List[PositionWithBullets]:
    """Merge ``step`` into ``state`` and return what was added, grouped by position."""

    snapshot = (state.extracted_data or InterviewOutput()).model_copy(deep=True)
    positions = snapshot.positions
    index = state.current_position_index
    added: List[PositionWithBullets] = []

    if step.extracted_position is not None:
        index, created = _place_position(positions, index, step.extracted_position)
        if created and state.pending_bullets:
            positions[index].bullets.extend(state.pending_bullets)
            added.append(_group(positions[index].position, state.pending_bullets))
            state.pending_bullets = []

    new_bullets = [bullet.model_copy(deep=True) for bullet in step.extracted_bullets]
    if new_bullets:
        if positions:
            positions[index].bullets.extend(new_bullets)
            _add(added, positions[index].position, new_bullets)
        else:
            state.pending_bullets = state.pending_bullets + new_bullets

    if step.extracted_position is not None or new_bullets or state.extracted_data is not None:
        state.extracted_data = snapshot
    state.current_position_index = index if positions else 0
    return added


def _place_position(positions: List[PositionWithBullets], index: int, incoming: Position) -> tuple[int, bool]:
    key = incoming.identity()
    if positions and positions[index].position.identity() == key:
        positions[index].position = _update(positions[index].position, incoming)
        return index, False
    for i, entry in enumerate(positions):
        if entry.position.identity() == key:
            entry.position = _update(entry.position, incoming)
            return i, False
    positions.append(PositionWithBullets(position=incoming.model_copy(deep=True), bullets=[]))
    return len(positions) - 1, True


def _update(current: Position, incoming: Position) -> Position:
    return current.model_copy(update=incoming.model_dump(exclude_none=True))


def _group(position: Position, bullets: List[Bullet]) -> PositionWithBullets:
    return PositionWithBullets(position=position, bullets=list(bullets))


def _add(added: List[PositionWithBullets], position: Position, bullets: List[Bullet]) -> None:
    existing: Optional[PositionWithBullets] = next(
        (group for group in added if group.position.identity() == position.identity()), None
    )
    if existing is None:
        added.append(_group(position, bullets))
    else:
        existing.bullets.extend(bullets)


__all__ = ["merge_step"]
