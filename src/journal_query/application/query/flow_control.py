"""Application query – flow control for tag queries.

After every batch a tag query decides whether to query again right away,
wait and poll, or finish.
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Collection

from journal_query.application.query.frontier import MaxOrderingSnapshot


class FlowControl(enum.Enum):
    CONTINUE = "continue"
    """More events are known to exist; query again immediately."""

    CONTINUE_DELAYED = "continue_delayed"
    """Caught up; wait ``refresh_interval`` before polling again."""

    STOP = "stop"
    """Bounded query reached its target. Terminal."""


@dataclasses.dataclass(frozen=True)
class TagCursor:
    """Resumption state of a tag stream: last offset read plus the next move."""

    offset: int
    control: FlowControl = FlowControl.CONTINUE


def next_flow_control(
    cursor: TagCursor,
    batch_orderings: Collection[int],
    batch_size: int,
    target: int | None,
    frontier: MaxOrderingSnapshot,
) -> TagCursor:
    """Compute the cursor that follows a batch read from *cursor*.

    *target* is set only for bounded queries; the query stops once it has
    certainly seen every ordering up to it. The frontier check keeps a
    short batch from stopping the query while lower orderings may still
    become visible.
    """
    if cursor.control is FlowControl.STOP:
        return cursor

    has_more = len(batch_orderings) >= batch_size
    next_offset = max(batch_orderings, default=cursor.offset)

    if target is not None and not has_more and target <= frontier.max_ordering:
        control = FlowControl.STOP
    elif target is not None and any(o >= target for o in batch_orderings):
        control = FlowControl.STOP
    elif has_more:
        control = FlowControl.CONTINUE
    else:
        control = FlowControl.CONTINUE_DELAYED
    return TagCursor(next_offset, control)


__all__ = ["FlowControl", "TagCursor", "next_flow_control"]
