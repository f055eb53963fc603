"""Per-session list of recently searched cities."""
from typing import List, Optional, Sequence


def update_search_history(history: Optional[Sequence[str]], city: str, *, limit: int = 5) -> List[str]:
    """Return a new history with `city` first, duplicates removed, at most `limit` long.

    Duplicates are matched case-insensitively so "london" and "London" take a
    single slot; the most recent spelling is kept.
    """
    key = city.strip().lower()
    entries = [c for c in (history or []) if c.strip().lower() != key]
    entries.insert(0, city.strip())
    return entries[:limit]
