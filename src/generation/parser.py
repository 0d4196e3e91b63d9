"""Response parsing for generated articles.

The model is asked for exactly one ``# `` heading but is not trusted to
comply. The parser is total: any string, including the empty string,
yields a well-formed draft.
"""

from datetime import datetime, timezone

from src.storage.schemas import ArticleDraft

HEADING_MARKER = "# "
FALLBACK_TITLE = "Untitled technical article"


def extract_title(raw_text: str) -> str | None:
    """Return the text of the first top-level heading, or None."""
    for line in raw_text.split("\n"):
        if line.startswith(HEADING_MARKER):
            title = line[len(HEADING_MARKER):].strip()
            return title or None
    return None


class GenerationResponseParser:
    """Turns raw generated text into an ArticleDraft."""

    def __init__(self, fallback_title: str = FALLBACK_TITLE) -> None:
        self.fallback_title = fallback_title

    def parse(self, raw_text: str | None) -> ArticleDraft:
        """Parse generated text.

        The heading is not stripped from the content, and ``created_at`` is
        the time of parsing, never a date found in the text.
        """
        text = raw_text or ""
        title = extract_title(text) or self.fallback_title
        return ArticleDraft(
            title=title,
            content=text,
            created_at=datetime.now(timezone.utc),
        )
