"""Review Store CLI — run the server and manage the database.

Usage:
    reviewstore serve --port 8000 --reload       # Run the API with uvicorn
    reviewstore init-db                           # Create tables from the models
    reviewstore init-db --drop                    # Drop and recreate them
    reviewstore seed                              # Insert sample users, items, reviews, comments

Database and secrets come from REVIEWSTORE_* env vars (see config.py).
"""

from __future__ import annotations

import asyncio

import click
import structlog

from reviewstore.config import settings
from reviewstore.logging_config import configure_logging

logger = structlog.get_logger()

SAMPLE_USERS = [
    {"username": "Lebron", "password": "Lakers"},
    {"username": "Angel Reece", "password": "LSU"},
]

SAMPLE_ITEMS = [
    {"title": "Life of Kobe", "details": "Kobe's life story"},
    {"title": "Life of Shaq", "details": "Shaq's life story"},
]

# (author index, item index, text, score)
SAMPLE_REVIEWS = [
    (1, 0, "Great book on Kobe", 5),
    (0, 1, "Great book on Shaq", 4),
]

# (author index, review index, content)
SAMPLE_COMMENTS = [
    (0, 0, "Kobe is top 3 best nba players of all time"),
    (1, 1, "Shaq is the most dominant player of all time"),
]


@click.group()
def cli():
    """Review Store — items, reviews and comments."""
    configure_logging(settings.log_level, json_logs=settings.log_json)


@cli.command()
@click.option("--host", default=None, help="Bind address (default: REVIEWSTORE_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: REVIEWSTORE_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "reviewstore.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("init-db")
@click.option("--drop", is_flag=True, help="Drop existing tables first")
def init_db(drop: bool):
    """Create the database tables."""
    from reviewstore.db.engine import create_all, engine

    async def _run():
        try:
            await create_all(drop=drop)
        finally:
            await engine.dispose()

    asyncio.run(_run())
    click.echo("Tables dropped and recreated." if drop else "Tables created.")


async def seed_database(session_factory) -> dict:
    """Insert the sample data through the service layer. Returns counts."""
    from reviewstore.services.comment_service import CommentService
    from reviewstore.services.item_service import ItemService
    from reviewstore.services.review_service import ReviewService
    from reviewstore.services.user_service import UserService

    async with session_factory() as db:
        users = [
            await UserService(db).register(u["username"], u["password"])
            for u in SAMPLE_USERS
        ]
        items = [
            await ItemService(db).create_item(i["title"], i["details"])
            for i in SAMPLE_ITEMS
        ]
        reviews = [
            await ReviewService(db).create_review(
                items[item_idx].id, owner_id=users[user_idx].id, text=text, score=score
            )
            for user_idx, item_idx, text, score in SAMPLE_REVIEWS
        ]
        comments = [
            await CommentService(db).create_comment(
                reviews[review_idx].id, owner_id=users[user_idx].id, content=content
            )
            for user_idx, review_idx, content in SAMPLE_COMMENTS
        ]

    counts = {
        "users": len(users),
        "items": len(items),
        "reviews": len(reviews),
        "comments": len(comments),
    }
    logger.info("seed.completed", **counts)
    return counts


@cli.command()
def seed():
    """Insert sample users, items, reviews and comments."""
    from reviewstore.db.engine import async_session_factory, engine

    async def _run():
        try:
            return await seed_database(async_session_factory)
        finally:
            await engine.dispose()

    counts = asyncio.run(_run())
    click.echo(
        f"Seeded {counts['users']} users, {counts['items']} items, "
        f"{counts['reviews']} reviews, {counts['comments']} comments."
    )


if __name__ == "__main__":
    cli()
