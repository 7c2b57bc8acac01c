"""
Commit snapshot for gitdevflow.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Commit:
    """
    A commit as read from the repository.

    Attributes:
        id: Full commit id
        parent_ids: Parent ids in recorded order; the first is the mainline parent
        short_message: First line of the message
        full_message: Complete message including body and trailers
    """

    id: str
    parent_ids: Tuple[str, ...] = ()
    short_message: str = ""
    full_message: str = ""

    @property
    def mainline_parent(self) -> Optional[str]:
        return self.parent_ids[0] if self.parent_ids else None

    @property
    def is_root(self) -> bool:
        return not self.parent_ids

    def __str__(self) -> str:
        return f"{self.id} {self.short_message}"
