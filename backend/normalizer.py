import re

# Matches: CS 210, STAT 415, MATH 441. Leading digit of the number is the level.
CANONICAL = re.compile(r'^([A-Z]+)\s+(\d)(\d{2})$')


def parse_course_code(code) -> tuple[str, str, str] | None:
    """
    Splits a course code into (department, level digit, remaining digits).

    'CS 210'  → ('CS', '2', '10')
    'AA 120N' → None   (suffixes do not fit the pattern shape)
    'cs 210'  → None   (department must already be upper case)

    Returns None for anything that does not match; callers skip those courses.
    """
    if not isinstance(code, str):
        return None
    m = CANONICAL.match(code)
    if not m:
        return None
    return m.group(1), m.group(2), m.group(3)


def normalize_filter(raw) -> str | None:
    """Empty strings and None both mean 'no filter' on a pattern group."""
    if raw is None:
        return None
    s = str(raw).strip()
    return s or None
