"""CLI tests — seeding through the services and the init-db command."""

import pytest
from click.testing import CliRunner

from reviewstore.cli.main import SAMPLE_COMMENTS, SAMPLE_USERS, cli, seed_database

API = "/api/v1"


@pytest.mark.asyncio
async def test_seed_database(session_factory, client):
    counts = await seed_database(session_factory)
    assert counts == {"users": 2, "items": 2, "reviews": 2, "comments": len(SAMPLE_COMMENTS)}

    r = await client.post(f"{API}/users/login", json=SAMPLE_USERS[0])
    assert r.status_code == 200
    headers = {"Authorization": f"Bearer {r.json()['token']}"}

    r = await client.get(f"{API}/items")
    assert [i["title"] for i in r.json()] == ["Life of Kobe", "Life of Shaq"]

    r = await client.get(f"{API}/users/me/reviews", headers=headers)
    assert [rv["text"] for rv in r.json()] == ["Great book on Shaq"]


def test_init_db_command():
    result = CliRunner().invoke(cli, ["init-db", "--drop"])
    assert result.exit_code == 0, result.output
    assert "recreated" in result.output


def test_help_lists_commands():
    result = CliRunner().invoke(cli, ["--help"])
    assert result.exit_code == 0
    for name in ("serve", "init-db", "seed"):
        assert name in result.output
