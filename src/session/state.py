"""Session state and its pure reducer.

A session follows one repository timeline: it loads activities, lets the
user select one and holds the article generated from it. Every fetch is
tagged with a sequence number; results tagged with an older number than
the latest issued fetch are dropped, so the last fetch started wins even
if an earlier one resolves later.
"""

from dataclasses import dataclass, field, replace
from typing import Literal, Union

from src.activity.schemas import CommitActivity, PullRequestActivity
from src.storage.schemas import Article, ArticleDraft, RepositoryRef

SessionStatus = Literal["idle", "loading", "ready", "error"]

TimelineActivity = Union[CommitActivity, PullRequestActivity]


@dataclass(frozen=True)
class SessionState:
    """Immutable view of one session.

    Attributes:
        status: idle, loading, ready or error.
        repository: Repository of the latest fetch, if any.
        activities: Timeline of the latest successful fetch, newest first.
        selected_id: Id of the selected activity.
        article: Article generated for the selection (draft or saved).
        error: User-facing message of the latest failed fetch.
        latest_seq: Sequence number of the latest fetch issued.
    """

    status: SessionStatus = "idle"
    repository: RepositoryRef | None = None
    activities: tuple[TimelineActivity, ...] = field(default_factory=tuple)
    selected_id: str | None = None
    article: ArticleDraft | Article | None = None
    error: str | None = None
    latest_seq: int = 0

    @property
    def selected(self) -> TimelineActivity | None:
        if self.selected_id is None:
            return None
        for activity in self.activities:
            if activity.id == self.selected_id:
                return activity
        return None


@dataclass(frozen=True)
class SetLoading:
    seq: int
    repository: RepositoryRef


@dataclass(frozen=True)
class SetError:
    seq: int
    message: str


@dataclass(frozen=True)
class SetActivities:
    seq: int
    repository: RepositoryRef
    activities: tuple[TimelineActivity, ...]


@dataclass(frozen=True)
class SelectActivity:
    activity_id: str | None


@dataclass(frozen=True)
class SetGeneratedArticle:
    article: ArticleDraft | Article | None


SessionEvent = Union[SetLoading, SetError, SetActivities, SelectActivity, SetGeneratedArticle]


def is_stale(state: SessionState, seq: int) -> bool:
    """True if ``seq`` is older than the latest fetch issued."""
    return seq < state.latest_seq


def reduce(state: SessionState, event: SessionEvent) -> SessionState:
    """Apply one event and return the next state. Never mutates ``state``."""
    if isinstance(event, SetLoading):
        if is_stale(state, event.seq):
            return state
        return replace(
            state,
            status="loading",
            repository=event.repository,
            error=None,
            latest_seq=event.seq,
        )

    if isinstance(event, SetError):
        if is_stale(state, event.seq):
            return state
        return replace(state, status="error", error=event.message, latest_seq=event.seq)

    if isinstance(event, SetActivities):
        if is_stale(state, event.seq):
            return state
        activities = tuple(event.activities)
        selected_id = state.selected_id
        if selected_id is not None and all(a.id != selected_id for a in activities):
            selected_id = None
        same_selection = selected_id is not None and selected_id == state.selected_id
        return replace(
            state,
            status="ready",
            repository=event.repository,
            activities=activities,
            selected_id=selected_id,
            article=state.article if same_selection else None,
            error=None,
            latest_seq=event.seq,
        )

    if isinstance(event, SelectActivity):
        if event.activity_id is None:
            return replace(state, selected_id=None, article=None)
        if all(a.id != event.activity_id for a in state.activities):
            return state
        if event.activity_id == state.selected_id:
            return state
        return replace(state, selected_id=event.activity_id, article=None)

    if isinstance(event, SetGeneratedArticle):
        return replace(state, article=event.article)

    raise TypeError(f"Unknown session event: {type(event).__name__}")
