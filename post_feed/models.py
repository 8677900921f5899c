"""
Data models for the Post Feed.

This defines the records fetched from the remote API, the sentinel results
returned instead of raising, and the structures passed between the pipeline
stages.
"""

from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional, Union

from bs4 import Tag

# Resource kinds served by the remote API
ResourceKind = Literal["users", "posts", "comments"]

# Refresh cycle states; "Committed" and "Failed" are terminal
CycleState = Literal["Idle", "FetchingPosts", "BuildingSubtrees", "Committed", "Failed"]


@dataclass(frozen=True)
class User:
    id: int
    name: str
    company_name: str
    company_catch_phrase: str


@dataclass(frozen=True)
class Post:
    id: int
    user_id: int
    title: str
    body: str


@dataclass(frozen=True)
class Comment:
    id: int
    post_id: int
    name: str
    email: str
    body: str


# --- Decode results ---

@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class Invalid:
    reason: str


Decoded = Union[Ok, Invalid]


# --- Sentinels ---

@dataclass(frozen=True)
class AbsentInput:
    """A missing or non-positive identifier was passed; no I/O was attempted."""
    kind: str
    id: Any


@dataclass(frozen=True)
class FetchFailure:
    """Transport or decode failure for a single remote call."""
    kind: str
    id: Optional[int]
    cause: str


@dataclass(frozen=True)
class NotFound:
    """A toggle referenced a post id with no registered entry."""
    post_id: Any


FetchResult = Union[Any, FetchFailure, AbsentInput]


@dataclass
class PostSubtree:
    """
    One rendered post, plus direct references to the nodes the
    toggle registry needs to address it.
    """
    post_id: int
    node: Tag
    trigger: Tag
    section: Tag


@dataclass(frozen=True)
class RefreshReport:
    detached: int
    appended: int
    attached: int


@dataclass
class CycleResult:
    user_id: Optional[int]
    state: CycleState
    post_ids: List[int] = field(default_factory=list)
    bindings: int = 0
    reason: Optional[str] = None

    @property
    def committed(self) -> bool:
        return self.state == "Committed"
