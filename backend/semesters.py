import re

# Planning horizon, oldest first. Index is the semester rank.
SEMESTER_ORDER = ("Fall 2025", "Spring 2026", "Fall 2026", "Spring 2027")

# Placement bucket for courses that are not scheduled yet. Never ranked.
POOL = "pool"

PLACEMENT_KEYS = SEMESTER_ORDER + (POOL,)

SEM_RE = re.compile(r"^(Spring|Summer|Fall)\s+(\d{4})$", re.IGNORECASE)

_RANKS = {label: idx for idx, label in enumerate(SEMESTER_ORDER)}


def semester_rank(label: str, semester_order=SEMESTER_ORDER) -> int | None:
    """
    Position of `label` in the semester order, or None for the pool and for
    labels outside the planning horizon.
    """
    if semester_order is SEMESTER_ORDER:
        return _RANKS.get(label)
    try:
        return list(semester_order).index(label)
    except ValueError:
        return None


def is_real_semester(label: str, semester_order=SEMESTER_ORDER) -> bool:
    return label != POOL and semester_rank(label, semester_order) is not None


def parse_season(label: str) -> str:
    """'Fall 2026' → 'Fall'. Everything after the first space is ignored."""
    return str(label or "").split(" ")[0]


def normalize_semester_label(label: str) -> str:
    m = SEM_RE.match((label or "").strip())
    if not m:
        return label
    term = m.group(1).capitalize()
    year = int(m.group(2))
    return f"{term} {year}"
