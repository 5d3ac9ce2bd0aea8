from collections.abc import Callable, Sequence
from difflib import get_close_matches

from ritual.core.errors import AmbiguousError
from ritual.core.models import Habit

__all__ = ["EXACT", "LOOSE", "Matcher", "find_habit"]

FUZZY_MATCH_CUTOFF = 0.8

Matcher = Callable[[str, Sequence[Habit]], Habit | None]


def _single(ref: str, hits: list[Habit], label: Callable[[Habit], str]) -> Habit | None:
    if len(hits) > 1:
        raise AmbiguousError(ref, count=len(hits), sample=[label(h) for h in hits[:3]])
    return hits[0] if hits else None


def by_id(ref: str, pool: Sequence[Habit]) -> Habit | None:
    """Full id, or a prefix of the 8-char short id shown in listings."""
    exact = next((h for h in pool if h.id == ref), None)
    if exact:
        return exact
    key = ref.lower()
    return _single(ref, [h for h in pool if h.id[:8].startswith(key)], lambda h: h.id[:8])


def by_name(ref: str, pool: Sequence[Habit]) -> Habit | None:
    key = ref.lower()
    exact = next((h for h in pool if h.name.lower() == key), None)
    if exact:
        return exact
    return _single(ref, [h for h in pool if key in h.name.lower()], lambda h: h.name)


def by_description(ref: str, pool: Sequence[Habit]) -> Habit | None:
    key = ref.lower()
    hits = [h for h in pool if h.description and key in h.description.lower()]
    return _single(ref, hits, lambda h: h.name)


def by_close_name(ref: str, pool: Sequence[Habit]) -> Habit | None:
    names = {h.name.lower(): h for h in pool}
    close = get_close_matches(ref.lower(), list(names), n=1, cutoff=FUZZY_MATCH_CUTOFF)
    return names[close[0]] if close else None


# Destructive commands stop before typo correction.
EXACT: tuple[Matcher, ...] = (by_id, by_name, by_description)
LOOSE: tuple[Matcher, ...] = (*EXACT, by_close_name)


def find_habit(ref: str, pool: Sequence[Habit], matchers: Sequence[Matcher] = LOOSE) -> Habit | None:
    """First matcher with a hit wins. Ambiguity inside a matcher raises."""
    ref = ref.strip()
    if not ref or not pool:
        return None
    for match in matchers:
        habit = match(ref, pool)
        if habit:
            return habit
    return None
