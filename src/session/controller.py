"""Session controller.

Drives a SessionState through fetches, selection, generation and saving.
Side effects (remote calls, cache and store writes) happen here; state
transitions all go through ``reduce``.
"""

import itertools
import logging

from src.activity.merger import sort_activities
from src.errors import ChronicleError, ValidationError
from src.generation.service import GenerationService
from src.history.client import GitHubHistoryClient
from src.session.state import (
    SelectActivity,
    SessionEvent,
    SessionState,
    SetActivities,
    SetError,
    SetGeneratedArticle,
    SetLoading,
    reduce,
)
from src.storage.article_store import ArticleStore
from src.storage.schemas import Article, ArticleDraft, RepositoryRef, SessionSnapshot
from src.storage.session_cache import SessionCache

logger = logging.getLogger(__name__)


class SessionController:
    """Owns one session and its collaborators.

    Args:
        history: Remote history client.
        generator: Article generation service.
        store: Durable article store.
        cache: Session snapshot cache.
    """

    def __init__(
        self,
        history: GitHubHistoryClient,
        generator: GenerationService,
        store: ArticleStore,
        cache: SessionCache,
    ) -> None:
        self._history = history
        self._generator = generator
        self._store = store
        self._cache = cache
        self._state = SessionState()
        self._seq = itertools.count(1)

    @property
    def state(self) -> SessionState:
        return self._state

    def _dispatch(self, event: SessionEvent) -> SessionState:
        self._state = reduce(self._state, event)
        return self._state

    def _next_seq(self) -> int:
        return next(self._seq)

    def restore(self) -> SessionState:
        """Load the cached snapshot, if any, into the session.

        Cached activities are re-sorted most recent first.
        """
        snapshot = self._cache.load()
        if snapshot is None:
            return self._state
        logger.info(
            "Restored %d cached activities for %s",
            len(snapshot.activities),
            snapshot.repository.full_name,
        )
        return self._dispatch(
            SetActivities(
                seq=self._next_seq(),
                repository=snapshot.repository,
                activities=tuple(sort_activities(snapshot.activities)),
            )
        )

    async def load_activity(
        self,
        owner: str,
        repo: str,
        per_page: int | None = None,
    ) -> SessionState:
        """Fetch the merged timeline for ``owner/repo``.

        Remote failures end in the ``error`` status with a user-facing
        message. Invalid owner/repo values are recorded the same way and
        then re-raised. Only the latest issued fetch updates the state and
        the cache.
        """
        seq = self._next_seq()
        repository = RepositoryRef(owner=owner, name=repo)
        self._dispatch(SetLoading(seq=seq, repository=repository))

        try:
            activities = await self._history.fetch_activity(owner, repo, per_page=per_page)
        except ChronicleError as e:
            logger.warning("Fetch %d for %s failed: %s", seq, repository.full_name, e)
            self._dispatch(SetError(seq=seq, message=e.user_message))
            if isinstance(e, ValidationError):
                raise
            return self._state

        self._dispatch(
            SetActivities(seq=seq, repository=repository, activities=tuple(activities))
        )
        if self._state.latest_seq != seq:
            logger.debug("Dropped stale fetch %d for %s", seq, repository.full_name)
            return self._state

        self._cache.save(SessionSnapshot(repository=repository, activities=activities))
        return self._state

    def select(self, activity_id: str | None) -> SessionState:
        """Select an activity of the current timeline (None clears)."""
        return self._dispatch(SelectActivity(activity_id=activity_id))

    async def generate_for_selected(self) -> ArticleDraft:
        """Generate an article for the selected activity.

        Raises:
            ValidationError: If nothing is selected or the activity is unusable.
            ConfigurationError, ThrottlingError, GenerationFailedError: From generation.
        """
        activity = self._state.selected
        if activity is None:
            raise ValidationError("activity", "No activity selected")

        draft = await self._generator.generate(activity, repository=self._state.repository)
        if self._state.selected_id == activity.id:
            self._dispatch(SetGeneratedArticle(article=draft))
        return draft

    def save_article(self) -> Article:
        """Persist the generated article of the current selection.

        Raises:
            ValidationError: If no article has been generated.
            StorageError: If the store could not be written.
        """
        article = self._state.article
        if article is None:
            raise ValidationError("article", "No generated article to save")
        if isinstance(article, Article):
            return article

        saved = self._store.save(article)
        self._dispatch(SetGeneratedArticle(article=saved))
        return saved
