"""
Placement store: which semester (or the pool) holds each course id.

A Placements object is never mutated after construction. `move` and `remove`
return a new object, so readers only ever see a mapping where each id sits
in exactly one slot.
"""

from __future__ import annotations

import sys

from semesters import (
    PLACEMENT_KEYS,
    POOL,
    SEMESTER_ORDER,
    is_real_semester,
    normalize_semester_label,
    semester_rank,
)


class Placements:
    def __init__(self, slots: dict[str, list[str]] | None = None):
        self._slots: dict[str, tuple[str, ...]] = {key: () for key in PLACEMENT_KEYS}
        for key, ids in (slots or {}).items():
            self._slots[key] = tuple(ids)
        self._where: dict[str, str] = {}
        for key, ids in self._slots.items():
            for course_id in ids:
                self._where.setdefault(course_id, key)

    @classmethod
    def empty(cls) -> "Placements":
        return cls()

    @classmethod
    def from_dict(cls, raw) -> "Placements":
        """
        Build from the JSON mapping {"Fall 2025": [...], ..., "pool": [...]}.

        Keys outside the planning horizon are dropped. An id listed twice keeps
        its first slot (semester order, then pool).
        """
        if raw is None:
            return cls.empty()
        if not isinstance(raw, dict):
            raise ValueError("placements must be an object keyed by semester.")

        unknown = sorted(str(k) for k in raw if k not in PLACEMENT_KEYS)
        if unknown:
            print(f"[WARN] Ignoring unknown placement keys: {unknown}", file=sys.stderr)

        seen: set[str] = set()
        slots: dict[str, list[str]] = {}
        for key in PLACEMENT_KEYS:
            ids = raw.get(key, [])
            if ids is None:
                ids = []
            if not isinstance(ids, list):
                raise ValueError(f"placements[{key!r}] must be a list of course ids.")
            kept: list[str] = []
            for course_id in ids:
                cid = str(course_id)
                if cid in seen:
                    print(f"[WARN] Course id {cid!r} placed more than once; keeping first slot.", file=sys.stderr)
                    continue
                seen.add(cid)
                kept.append(cid)
            slots[key] = kept
        return cls(slots)

    def to_dict(self) -> dict[str, list[str]]:
        return {key: list(ids) for key, ids in self._slots.items()}

    def keys(self) -> tuple[str, ...]:
        return tuple(self._slots)

    def semester(self, label: str) -> tuple[str, ...]:
        return self._slots.get(label, ())

    def locate(self, course_id: str) -> str | None:
        """Key holding `course_id`, or None if it is not placed anywhere."""
        return self._where.get(course_id)

    def scheduled(self, semester_order=SEMESTER_ORDER):
        """Yield (semester, rank, course_id) for real semesters, oldest first."""
        for label in semester_order:
            if not is_real_semester(label, semester_order):
                continue
            rank = semester_rank(label, semester_order)
            for course_id in self._slots.get(label, ()):
                yield label, rank, course_id

    def move(self, course_id: str, target: str) -> "Placements":
        """Remove `course_id` from every slot, then append it to `target`."""
        target = normalize_semester_label(str(target or "").strip())
        if target.lower() == POOL:
            target = POOL
        if target not in self._slots:
            raise ValueError(f"Unknown placement target: {target!r}")
        slots = {
            key: [cid for cid in ids if cid != course_id]
            for key, ids in self._slots.items()
        }
        slots[target].append(course_id)
        return Placements(slots)

    def remove(self, course_id: str) -> "Placements":
        return Placements({
            key: [cid for cid in ids if cid != course_id]
            for key, ids in self._slots.items()
        })

    def add_to_pool(self, course_id: str) -> "Placements":
        return self.move(course_id, POOL)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Placements):
            return NotImplemented
        return self._slots == other._slots

    def __repr__(self) -> str:
        return f"Placements({self.to_dict()!r})"
