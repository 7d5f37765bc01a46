import collections
import logging
import re
from typing import Iterable

logger = logging.getLogger(__name__)


class AutoCounter:
    """A simple auto-incrementing counter for generating unique IDs."""

    def __init__(self, delimiter: str = "-") -> None:
        self.names: collections.defaultdict[str, int] = collections.defaultdict(int)
        self.delimiter = delimiter

    def get_id(self, base: str, taken: Iterable[str] = ()) -> str:
        """Get an ID based on the base name, skipping the taken ones."""
        taken = set(taken)
        while True:
            self.names[base] += 1
            id_ = f"{base}{self.delimiter}{self.names[base]}"
            if id_ not in taken:
                return id_


def next_indexed_name(base: str, names: Iterable[str]) -> str:
    """Next free numbered name for the base, e.g. "Curves 3".

    An existing bare "Curves" counts as number 1.
    """
    matcher = re.compile(rf"^{re.escape(base)}\s*(\d+)?$", re.IGNORECASE)
    largest = 0
    for name in names:
        match = matcher.match(name.strip())
        if match:
            largest = max(largest, int(match.group(1)) if match.group(1) else 1)
    return f"{base} {largest + 1}"
