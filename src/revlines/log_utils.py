import re
from enum import Enum

from thefuzz import fuzz

# Minimum thefuzz partial ratio for a fuzzy match
FUZZY_THRESHOLD = 75


class FilterMode(Enum):
    RAW = "raw"
    REGEX = "regex"
    FUZZY = "fuzzy"


def value_matches(value: str, filter: str, mode: FilterMode) -> bool:
    if not value:
        return False
    if mode == FilterMode.RAW:
        return filter.lower() in value.lower()
    elif mode == FilterMode.REGEX:
        return re.search(filter, value) is not None
    else:
        return fuzz.partial_ratio(value.lower(), filter.lower()) > FUZZY_THRESHOLD


def line_matches(line: str, filters: list[str], mode: FilterMode) -> bool:
    """ Whether a line matches every filter (a line always matches an empty filter list) """
    return all(value_matches(line, f, mode) for f in filters)
