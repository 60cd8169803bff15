"""
HTTP layer tests: FastAPI TestClient with the database dependency overridden.

The client is not used as a context manager, so the lifespan (and with it a
real connection pool) never starts.
"""

import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from core.db import QueryResult
from core.dependencies import get_database
from core.results import QueryFailed
from main import app


@pytest.fixture
def client(mock_db):
    app.dependency_overrides[get_database] = lambda: mock_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_index_lists_routes(client):
    response = client.get("/")

    assert response.status_code == 200
    assert {"href": "/news", "methods": ["GET", "POST"]} in response.json()


def test_list_news(client, mock_db, news_row):
    mock_db.query.return_value = QueryResult(rows=[news_row], row_count=1)

    response = client.get("/news")

    assert response.status_code == 200
    body = response.json()
    assert body[0]["title"] == news_row["title"]
    assert body[0]["id"] == str(news_row["id"])


def test_list_news_empty_is_404(client, mock_db):
    mock_db.query.return_value = QueryResult(rows=[], row_count=0)

    assert client.get("/news").status_code == 404


def test_list_news_failure_is_500(client, mock_db):
    mock_db.query.return_value = QueryFailed("no database connection")

    assert client.get("/news").status_code == 500


def test_get_news(client, mock_db, news_row, ids):
    mock_db.query.return_value = QueryResult(rows=[news_row], row_count=1)

    response = client.get(f"/news/{ids.news}")

    assert response.status_code == 200
    assert response.json()["league"] == "Premier League"


def test_get_news_malformed_id(client, mock_db):
    response = client.get("/news/not-a-uuid")

    assert response.status_code == 422
    mock_db.query.assert_not_awaited()


def test_create_news(client, mock_db):
    generated_id = uuid.uuid4()
    mock_db.query.return_value = QueryResult(
        rows=[{"id": generated_id, "inserted": datetime(2024, 1, 1, tzinfo=timezone.utc)}],
        row_count=1,
    )

    response = client.post(
        "/news",
        json={"title": " <script>alert(1)</script>Hello ", "content": "<b>Body</b>", "league": "Serie A"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["id"] == str(generated_id)
    assert body["title"] == "Hello"
    assert body["content"] == "Body"
    assert body["inserted"] is not None
    assert mock_db.query.await_args.args[1:] == ("Hello", "Body", "Serie A")


def test_create_news_validation_errors(client, mock_db):
    response = client.post("/news", json={"title": "a" * 65})

    assert response.status_code == 400
    errors = response.json()["detail"]["errors"]
    assert [e["field"] for e in errors] == ["title", "league"]
    mock_db.query.assert_not_awaited()


def test_create_news_rejects_non_object(client, mock_db):
    response = client.post("/news", json=["title"])

    assert response.status_code == 400
    mock_db.query.assert_not_awaited()


def test_create_news_insert_failure(client, mock_db):
    mock_db.query.return_value = QueryFailed("fk violation")

    response = client.post("/news", json={"title": "Hello", "league": "Nowhere"})

    assert response.status_code == 500


def test_delete_news(client, mock_db, ids):
    mock_db.query.return_value = QueryResult(rows=[], row_count=1)

    response = client.delete(f"/news/{ids.news}")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "id": ids.news}


def test_delete_missing_news(client, mock_db, ids):
    mock_db.query.return_value = QueryResult(rows=[], row_count=0)

    assert client.delete(f"/news/{ids.news}").status_code == 404


def test_list_leagues(client, mock_db, league_row):
    mock_db.query.return_value = QueryResult(rows=[league_row], row_count=1)

    response = client.get("/leagues")

    assert response.status_code == 200
    assert response.json()[0]["name"] == "Premier League"


def test_league_news_unknown_league(client, mock_db, ids):
    mock_db.query.return_value = QueryResult(rows=[], row_count=0)

    assert client.get(f"/leagues/{ids.league}/news").status_code == 404


def test_league_news(client, mock_db, league_row, news_row, ids):
    mock_db.query.side_effect = [
        QueryResult(rows=[league_row], row_count=1),
        QueryResult(rows=[news_row], row_count=1),
    ]

    response = client.get(f"/leagues/{ids.league}/news")

    assert response.status_code == 200
    assert len(response.json()) == 1


def test_unavailable_database_is_503(monkeypatch):
    app.dependency_overrides.clear()
    monkeypatch.setattr(app.state, "db", None, raising=False)

    response = TestClient(app).get("/news")

    assert response.status_code == 503


def test_create_news_encoded_markup_is_stored_as_text(client, mock_db):
    mock_db.query.return_value = QueryResult(
        rows=[{"id": uuid.uuid4(), "inserted": datetime(2024, 1, 1, tzinfo=timezone.utc)}],
        row_count=1,
    )

    response = client.post(
        "/news",
        json={"title": "&lt;script&gt;alert(1)&lt;/script&gt;Hi", "league": "Serie A"},
    )

    assert response.status_code == 201
    assert response.json()["title"] == "Hi"
    assert mock_db.query.await_args.args[1] == "Hi"


def test_create_news_markup_only_title_is_400(client, mock_db):
    response = client.post("/news", json={"title": "<b></b>", "league": "Serie A"})

    assert response.status_code == 400
    assert [e["field"] for e in response.json()["detail"]["errors"]] == ["title"]
    mock_db.query.assert_not_awaited()
