"""Tests for ArticleStore."""

import re
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from src.errors import StorageError, ValidationError
from src.storage.article_store import ArticleStore
from src.storage.schemas import ArticleDraft, RepositoryRef


def _make_draft(title: str = "Taming cache races", **kwargs) -> ArticleDraft:
    """Helper to create an ArticleDraft with sensible defaults."""
    return ArticleDraft(
        title=title,
        content=kwargs.pop("content", f"# {title}\n\nBody."),
        created_at=kwargs.pop(
            "created_at", datetime(2024, 3, 2, 10, 0, 0, tzinfo=timezone.utc)
        ),
        source_activity_type=kwargs.pop("source_activity_type", "commit"),
        repository=kwargs.pop(
            "repository", RepositoryRef(owner="octocat", name="hello-world")
        ),
        **kwargs,
    )


# ── save / get / list ────────────────────────────────────


class TestSave:
    def test_save_then_get(self, article_store):
        saved = article_store.save(_make_draft())

        fetched = article_store.get(saved.id)

        assert fetched == saved
        assert fetched.title == "Taming cache races"
        assert fetched.source_activity_type == "commit"
        assert fetched.repository.full_name == "octocat/hello-world"
        assert fetched.updated_at is None

    def test_id_format(self, article_store):
        saved = article_store.save(_make_draft())
        assert re.fullmatch(r"article_\d+_[0-9a-f]{9}", saved.id)

    def test_defaults(self, article_store):
        saved = article_store.save(
            ArticleDraft(title="T", content="C", created_at=None, source_activity_type=None)
        )

        assert saved.created_at is not None
        assert saved.source_activity_type == "unknown"

    def test_newest_first(self, article_store):
        first = article_store.save(_make_draft("First"))
        second = article_store.save(_make_draft("Second"))

        assert [a.id for a in article_store.list()] == [second.id, first.id]

    def test_colliding_id_regenerated(self, article_store):
        existing = article_store.save(_make_draft("First"))

        ids = iter([existing.id, "article_1_abcdef012"])
        with patch("src.storage.article_store.generate_article_id", side_effect=lambda: next(ids)):
            second = article_store.save(_make_draft("Second"))

        assert second.id == "article_1_abcdef012"
        assert len(article_store.list()) == 2

    def test_write_failure_raises_and_persists_nothing(self, article_store, medium):
        article_store.save(_make_draft("Kept"))

        with patch.object(medium, "write", side_effect=StorageError("disk full")):
            with pytest.raises(StorageError) as exc_info:
                article_store.save(_make_draft("Lost"))

        assert exc_info.value.user_message == "The article could not be saved."
        assert [a.title for a in article_store.list()] == ["Kept"]

    def test_camel_case_on_medium(self, article_store, medium):
        article_store.save(_make_draft())

        stored = medium.read("articles")[0]
        assert "createdAt" in stored
        assert stored["sourceActivityType"] == "commit"
        assert stored["repository"] == {"owner": "octocat", "name": "hello-world"}


class TestList:
    def test_empty(self, article_store):
        assert article_store.list() == []

    def test_corrupt_collection_lists_empty(self, article_store, medium):
        medium.base_dir.mkdir(parents=True)
        (medium.base_dir / "articles.json").write_text("[{oops", encoding="utf-8")

        assert article_store.list() == []

    def test_non_array_collection_lists_empty(self, article_store, medium):
        medium.write("articles", {"not": "a list"})
        assert article_store.list() == []

    def test_unreadable_records_skipped(self, article_store, medium):
        saved = article_store.save(_make_draft())
        stored = medium.read("articles")
        medium.write("articles", [{"title": "no id"}, *stored])

        assert [a.id for a in article_store.list()] == [saved.id]

    def test_undecodable_collection_lists_empty(self, article_store, medium):
        medium.base_dir.mkdir(parents=True)
        (medium.base_dir / "articles.json").write_bytes(b"\xff\xfe[not utf8")

        assert article_store.list() == []

    def test_get_missing(self, article_store):
        assert article_store.get("article_0_000000000") is None


# ── update ───────────────────────────────────────────────


class TestUpdate:
    def test_merges_and_stamps(self, article_store):
        saved = article_store.save(_make_draft())

        updated = article_store.update(saved.id, {"title": "Renamed"})

        assert updated.title == "Renamed"
        assert updated.content == saved.content
        assert updated.updated_at is not None
        assert article_store.get(saved.id).title == "Renamed"

    def test_camel_case_keys_accepted(self, article_store):
        saved = article_store.save(_make_draft())

        updated = article_store.update(saved.id, {"sourceActivityType": "pull_request"})

        assert updated.source_activity_type == "pull_request"

    def test_immutable_fields_ignored(self, article_store):
        saved = article_store.save(_make_draft())

        updated = article_store.update(
            saved.id,
            {"id": "hijacked", "createdAt": "1999-01-01T00:00:00Z", "content": "New"},
        )

        assert updated.id == saved.id
        assert updated.created_at == saved.created_at
        assert updated.content == "New"

    def test_missing_returns_none(self, article_store):
        assert article_store.update("article_0_000000000", {"title": "x"}) is None

    def test_unknown_field_rejected(self, article_store):
        saved = article_store.save(_make_draft())

        with pytest.raises(ValidationError):
            article_store.update(saved.id, {"rating": 5})

    def test_invalid_value_rejected_before_write(self, article_store, medium):
        saved = article_store.save(_make_draft())

        with patch.object(medium, "write") as write:
            with pytest.raises(ValidationError):
                article_store.update(saved.id, {"sourceActivityType": "issue"})

        write.assert_not_called()

    def test_write_failure_returns_none(self, article_store, medium):
        saved = article_store.save(_make_draft())

        with patch.object(medium, "write", side_effect=StorageError("disk full")):
            assert article_store.update(saved.id, {"title": "x"}) is None

        assert article_store.get(saved.id).title == saved.title


# ── delete / clear ───────────────────────────────────────


class TestDelete:
    def test_delete_present_then_absent(self, article_store):
        saved = article_store.save(_make_draft())

        assert article_store.delete(saved.id) is True
        assert article_store.get(saved.id) is None
        assert article_store.delete(saved.id) is False

    def test_write_failure_returns_false(self, article_store, medium):
        saved = article_store.save(_make_draft())

        with patch.object(medium, "write", side_effect=StorageError("disk full")):
            assert article_store.delete(saved.id) is False

        assert article_store.get(saved.id) is not None


class TestUnreadableRecordsKept:
    LEGACY = {"title": "legacy without id", "content": "keep me"}

    def test_save_keeps_unreadable_record(self, article_store, medium):
        medium.write("articles", [self.LEGACY])

        saved = article_store.save(_make_draft())

        stored = medium.read("articles")
        assert stored[0]["id"] == saved.id
        assert stored[1] == self.LEGACY

    def test_update_keeps_position_of_unreadable_record(self, article_store, medium):
        saved = article_store.save(_make_draft())
        medium.write("articles", [self.LEGACY, *medium.read("articles")])

        assert article_store.update(saved.id, {"title": "Renamed"}) is not None

        stored = medium.read("articles")
        assert stored[0] == self.LEGACY
        assert stored[1]["title"] == "Renamed"

    def test_delete_keeps_unreadable_record(self, article_store, medium):
        saved = article_store.save(_make_draft())
        medium.write("articles", [*medium.read("articles"), self.LEGACY])

        assert article_store.delete(saved.id) is True

        assert medium.read("articles") == [self.LEGACY]
        assert article_store.list() == []


class TestClear:
    def test_clear_then_reuse(self, article_store):
        for i in range(3):
            article_store.save(_make_draft(f"Article {i}"))

        assert article_store.clear() is True
        assert article_store.list() == []

        article_store.save(_make_draft("After clear"))
        assert len(article_store.list()) == 1

    def test_write_failure_returns_false(self, article_store, medium):
        with patch.object(medium, "write", side_effect=StorageError("disk full")):
            assert article_store.clear() is False

    def test_separate_keys_are_independent(self, medium):
        drafts = ArticleStore(medium, key="drafts")
        published = ArticleStore(medium, key="published")

        drafts.save(_make_draft())

        assert published.list() == []
