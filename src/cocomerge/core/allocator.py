"""
Id allocation for one identifier namespace (categories, licenses, images or
annotations).
"""

from dataclasses import dataclass, field
from typing import Set


@dataclass
class IdAllocator:
    """Running "next unseen id" counter.

    Every id handed out or claimed moves the counter past it, so ``allocate``
    never returns an id that is already in use.
    """

    next_unseen: int = 0

    def peek(self) -> int:
        return self.next_unseen

    def allocate(self) -> int:
        new_id = self.next_unseen
        self.next_unseen += 1
        return new_id

    def claim(self, existing_id: int) -> None:
        if existing_id >= self.next_unseen:
            self.next_unseen = existing_id + 1


@dataclass
class IdNamespace:
    """Set of ids already placed in the output plus its allocator."""

    allocator: IdAllocator = field(default_factory=IdAllocator)
    seen: Set[int] = field(default_factory=set)

    def __contains__(self, item: int) -> bool:
        return item in self.seen

    def __len__(self) -> int:
        return len(self.seen)

    def accept(self, existing_id: int) -> int:
        """Keep an explicit id as-is."""
        self.seen.add(existing_id)
        self.allocator.claim(existing_id)
        return existing_id

    def reassign(self) -> int:
        """Hand out a fresh id."""
        new_id = self.allocator.allocate()
        self.seen.add(new_id)
        return new_id

    def resolve(self, existing_id: int) -> int:
        """First-seen wins: keep the id unless it is taken, else reassign."""
        if existing_id in self.seen:
            return self.reassign()
        return self.accept(existing_id)
