"""
Filter engine: one interpreter over structured [Filter][mockstr.models.filter.Filter] objects.

[matches()][mockstr.relay.matching.matches] is the conjunction of every
constraint present in the filter; absent fields do not constrain. Tag
filters look only at element 1 of each tag (the first value), so
``["a", "<coord>", "<relay-hint>"]`` matches ``{"#a": ["<coord>"]}`` but a
relay hint never does.

[select_for_subscription()][mockstr.relay.matching.select_for_subscription]
computes the historical backlog of a ``REQ``: the union of all filters,
newest first, truncated to the smallest ``limit``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from mockstr.models import Event, Filter


def matches(event: Event, flt: Filter) -> bool:
    """Whether *event* passes every constraint present in *flt*."""
    if flt.ids is not None and event.id not in flt.ids:
        return False
    if flt.kinds is not None and event.kind not in flt.kinds:
        return False
    if flt.authors is not None and event.pubkey not in flt.authors:
        return False
    if flt.since is not None and event.created_at < flt.since:
        return False
    if flt.until is not None and event.created_at > flt.until:
        return False
    for letter, accepted in flt.tags.items():
        if not any(
            tag.name == letter and tag.values and tag.values[0] in accepted
            for tag in event.tags
        ):
            return False
    return True


def matches_any(event: Event, filters: Sequence[Filter]) -> bool:
    """Whether *event* passes at least one of *filters* (filters are OR'd)."""
    return any(matches(event, flt) for flt in filters)


def effective_limit(filters: Sequence[Filter]) -> int | None:
    """The smallest ``limit`` among *filters*, or ``None`` if none sets one."""
    limits = [flt.limit for flt in filters if flt.limit is not None]
    return min(limits) if limits else None


def sort_newest_first(events: Iterable[Event]) -> list[Event]:
    """Order by ``created_at`` descending, ties broken by id ascending."""
    return sorted(events, key=lambda e: (-e.created_at, e.id))


def select_for_subscription(events: Iterable[Event], filters: Sequence[Filter]) -> list[Event]:
    """Compute the backlog delivered when a subscription opens.

    Each event appears at most once even if several filters match it. An
    empty filter list selects nothing.

    Args:
        events: Candidate events (normally a store scan).
        filters: The subscription's filters.

    Returns:
        Matching events, newest first, truncated to the minimum ``limit``.
    """
    if not filters:
        return []
    selected = {e.id: e for e in events if matches_any(e, filters)}
    ordered = sort_newest_first(selected.values())
    limit = effective_limit(filters)
    if limit is not None:
        return ordered[:limit]
    return ordered
