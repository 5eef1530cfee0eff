# bookshop/domain/cart.py
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from bookshop.domain.errors import InvalidInput


def _check_positive_id(value, what: str) -> int:
    #bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidInput(f"{what} must be a positive integer, got {value!r}")
    return value


@dataclass
class Cart:
    """
    One cart per user. Repeated ids encode quantity: [3, 3, 5] is two copies
    of book 3 and one of book 5. An empty list means the user has no cart.
    """

    user_id: int
    book_ids: List[int] = field(default_factory=list)

    def __post_init__(self):
        _check_positive_id(self.user_id, "user id")
        self.book_ids = [_check_positive_id(b, "book id") for b in self.book_ids]

    @property
    def is_empty(self) -> bool:
        return not self.book_ids

    def quantities(self) -> Counter:
        return Counter(self.book_ids)

    def distinct_book_ids(self) -> List[int]:
        return sorted(set(self.book_ids))

    def to_dict(self) -> dict:
        return {"user_id": self.user_id, "book_ids": list(self.book_ids)}


@dataclass(frozen=True)
class CartDiff:
    """Per-book unit counts gained and lost when a cart is replaced."""

    added: Counter
    removed: Counter

    @classmethod
    def between(cls, previous: Iterable[int], requested: Iterable[int]) -> "CartDiff":
        before = Counter(previous)
        after = Counter(requested)
        #Counter subtraction keeps only positive counts
        return cls(added=after - before, removed=before - after)

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed

    def changes(self) -> List[Tuple[int, int]]:
        """
        (book_id, delta) for every touched book, ascending by id. A positive
        delta is units to reserve, a negative one units to release.
        """
        touched = sorted(set(self.added) | set(self.removed))
        return [(b, self.added[b] - self.removed[b]) for b in touched]
