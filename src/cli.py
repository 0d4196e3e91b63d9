"""
Command-line interface for repo-chronicle.

Fetches a repository's recent history, generates technical articles from
single commits or pull requests, and manages saved articles.

Usage:
    chronicle activity OWNER REPO   # Fetch and cache the merged timeline
    chronicle generate --index 0    # Generate an article from a cached activity
    chronicle articles list         # List saved articles
    chronicle serve                 # Start the API server
"""

import asyncio
import sys

import click

from src.config.settings import Settings, get_settings
from src.errors import ChronicleError
from src.observability.logging import bind_repository, setup_logging
from src.observability.metrics import get_metrics


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """repo-chronicle - Technical articles from repository history."""
    setup_logging("DEBUG" if debug else None)


def _fail(message: str) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _build_controller(settings: Settings):
    from src.generation.service import GenerationService
    from src.history.client import GitHubHistoryClient
    from src.session.controller import SessionController
    from src.storage.article_store import ArticleStore
    from src.storage.kv import JsonFileStore
    from src.storage.session_cache import SessionCache

    medium = JsonFileStore(settings.data_dir)
    return SessionController(
        history=GitHubHistoryClient(settings=settings),
        generator=GenerationService(),
        store=ArticleStore(medium, key=settings.articles_key),
        cache=SessionCache(medium, key=settings.session_key),
    )


def _build_store(settings: Settings):
    from src.storage.article_store import ArticleStore
    from src.storage.kv import JsonFileStore

    return ArticleStore(JsonFileStore(settings.data_dir), key=settings.articles_key)


def _describe(activity) -> str:
    if activity.type == "commit":
        return activity.subject or "(no message)"
    number = f"#{activity.number} " if activity.number is not None else ""
    return f"{number}{activity.title or '(no title)'}"


@main.command()
@click.argument("owner")
@click.argument("repo")
@click.option("--per-page", default=None, type=int, help="Items per source (1-100)")
def activity(owner: str, repo: str, per_page: int | None) -> None:
    """Fetch and cache the merged commit and pull request timeline.

    Example:
        chronicle activity octocat hello-world --per-page 10
    """
    bind_repository(owner, repo)
    controller = _build_controller(get_settings())

    try:
        state = asyncio.run(controller.load_activity(owner, repo, per_page=per_page))
    except ChronicleError as e:
        _fail(e.user_message)

    if state.status == "error":
        _fail(state.error or "Failed to fetch activity")

    click.echo(f"\nActivity for {owner}/{repo} ({len(state.activities)} items):")
    click.echo("-" * 60)
    for index, item in enumerate(state.activities):
        kind = "commit" if item.type == "commit" else "PR"
        date = item.date or "unknown date"
        click.echo(f"  [{index}] {kind:<6} {date:<22} {_describe(item)}")
    click.echo("-" * 60)


@main.command()
@click.option("--index", "index", default=None, type=int, help="Position in the cached timeline")
@click.option("--id", "activity_id", default=None, help="Commit SHA or pull request id")
@click.option("--save", is_flag=True, help="Save the generated article")
def generate(index: int | None, activity_id: str | None, save: bool) -> None:
    """Generate an article from one activity of the cached timeline.

    Run `chronicle activity OWNER REPO` first.

    Example:
        chronicle generate --index 0 --save
    """
    if (index is None) == (activity_id is None):
        _fail("Pass exactly one of --index or --id")

    controller = _build_controller(get_settings())
    state = controller.restore()
    if not state.activities:
        _fail("No cached activity. Run `chronicle activity OWNER REPO` first.")

    if index is not None:
        if not 0 <= index < len(state.activities):
            _fail(f"Index {index} out of range (0-{len(state.activities) - 1})")
        activity_id = state.activities[index].id
        if activity_id is None:
            _fail(f"Activity at index {index} has no id and cannot be selected")

    state = controller.select(activity_id)
    if state.selected is None:
        _fail(f"Activity {activity_id!r} not found in cached timeline")

    try:
        draft = asyncio.run(controller.generate_for_selected())
    except ChronicleError as e:
        _fail(e.user_message)

    click.echo(draft.content)

    if save:
        try:
            article = controller.save_article()
        except ChronicleError as e:
            _fail(e.user_message)
        click.echo(click.style(f"\nSaved article {article.id}", fg="green"))


@main.group()
def articles() -> None:
    """Saved article commands."""


@articles.command("list")
def articles_list() -> None:
    """List saved articles, newest first."""
    store = _build_store(get_settings())
    items = store.list()

    if not items:
        click.echo("No saved articles.")
        return

    click.echo(f"\nSaved articles ({len(items)}):")
    click.echo("-" * 60)
    for article in items:
        source = article.repository.full_name if article.repository else "-"
        click.echo(
            f"  {article.id}  {article.created_at:%Y-%m-%d %H:%M}  "
            f"{article.source_activity_type:<12} {source:<24} {article.title}"
        )
    click.echo("-" * 60)


@articles.command("show")
@click.argument("article_id")
def articles_show(article_id: str) -> None:
    """Print one saved article."""
    store = _build_store(get_settings())
    article = store.get(article_id)
    if article is None:
        _fail(f"Article {article_id!r} not found")
    click.echo(article.content)


@articles.command("delete")
@click.argument("article_id")
def articles_delete(article_id: str) -> None:
    """Delete one saved article."""
    store = _build_store(get_settings())
    if not store.delete(article_id):
        _fail(f"Article {article_id!r} not found or could not be deleted")
    click.echo(click.style(f"Deleted article {article_id}", fg="green"))


@articles.command("clear")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def articles_clear(yes: bool) -> None:
    """Delete every saved article."""
    if not yes:
        click.confirm("Delete all saved articles?", abort=True)

    store = _build_store(get_settings())
    if not store.clear():
        _fail("Could not clear saved articles")
    click.echo(click.style("All articles deleted", fg="green"))


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
@click.option("--metrics-port", default=None, type=int, help="Metrics server port")
def serve(host: str | None, port: int | None, reload: bool, metrics_port: int | None) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    metrics_port = metrics_port or settings.metrics_port

    # Start metrics server on separate port
    get_metrics().start_server(port=metrics_port)

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"Metrics available on http://localhost:{metrics_port}/metrics")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "src.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
