"""Unit tests for notion_api.api_wrapper module."""

from unittest.mock import MagicMock

import pytest
from requests.exceptions import ConnectionError, Timeout

from src.notion_api.api_wrapper import NOTION_VERSION, NotionAPI
from src.notion_api.auth import Authenticator
from src.notion_api.errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
    LinkedDatabaseError,
    NotionAPIError,
    ObjectNotFoundError,
)
from src.notion_api.retry_logic import ResilientClient
from tests.fixtures.notion_payloads import (
    DATA_SOURCE_ID,
    DATABASE_ID,
    block,
    data_source,
    database,
    list_response,
    page_row,
    paragraph,
)


def _response(status=200, body=None, headers=None, text=""):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.headers = headers or {}
    response.text = text
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def api(session, sleeps):
    client = ResilientClient(throttler=MagicMock(), sleep=sleeps.append, rng=lambda: 0.5)
    return NotionAPI(Authenticator("ntn_testkey123456"), resilient_client=client, session=session)


class TestSession:
    """Test cases for session setup."""

    def test_headers(self, monkeypatch):
        """A new session carries bearer auth and the pinned API version."""
        api = NotionAPI(Authenticator("ntn_testkey123456"))

        session = api._get_session()

        assert session.headers["Authorization"] == "Bearer ntn_testkey123456"
        assert session.headers["Notion-Version"] == NOTION_VERSION

    def test_missing_key_fails_before_request(self, monkeypatch):
        """Without a key no session is created and no request is made."""
        monkeypatch.setattr("src.notion_api.auth.load_dotenv", lambda: None)
        api = NotionAPI(Authenticator())

        with pytest.raises(InvalidCredentialsError):
            api.retrieve_database(DATABASE_ID)


class TestErrorTranslation:
    """Test cases for HTTP error translation."""

    def test_401(self, api, session):
        """401 becomes InvalidCredentialsError."""
        session.request.return_value = _response(401, {"code": "unauthorized", "message": "bad"})

        with pytest.raises(InvalidCredentialsError):
            api.retrieve_database(DATABASE_ID)

    def test_403_restricted_resource(self, api, session, sleeps):
        """403 restricted_resource is an access failure, raised without retrying."""
        session.request.return_value = _response(
            403, {"code": "restricted_resource", "message": "Insufficient permissions"}
        )

        with pytest.raises(InvalidCredentialsError) as exc_info:
            api.fetch_collection(DATABASE_ID)

        assert DATABASE_ID in str(exc_info.value)
        assert session.request.call_count == 1
        assert sleeps == []

    def test_404(self, api, session):
        """404 becomes ObjectNotFoundError naming the object."""
        session.request.return_value = _response(404, {"code": "object_not_found"})

        with pytest.raises(ObjectNotFoundError) as exc_info:
            api.retrieve_database(DATABASE_ID)

        assert exc_info.value.object_id == DATABASE_ID

    def test_400_fails_fast(self, api, session, sleeps):
        """Validation errors are not retried."""
        session.request.return_value = _response(400, {"code": "validation_error", "message": "nope"})

        with pytest.raises(NotionAPIError) as exc_info:
            api.retrieve_database(DATABASE_ID)

        assert exc_info.value.status == 400
        assert session.request.call_count == 1
        assert sleeps == []

    def test_429_retry_after(self, api, session, sleeps):
        """A 429 waits for the Retry-After header, then succeeds."""
        session.request.side_effect = [
            _response(429, {"code": "rate_limited"}, headers={"Retry-After": "3"}),
            _response(200, database()),
        ]

        assert api.retrieve_database(DATABASE_ID)["id"] == DATABASE_ID
        assert sleeps == [3.0]

    def test_persistent_503(self, api, session):
        """Five 503s exhaust the retry budget."""
        session.request.return_value = _response(503, text="unavailable")

        with pytest.raises(APIAccessError):
            api.retrieve_database(DATABASE_ID)

        assert session.request.call_count == 5

    @pytest.mark.parametrize("error", [Timeout("slow"), ConnectionError("refused")])
    def test_unreachable(self, api, session, error):
        """Transport failures become APIUnreachableError."""
        session.request.side_effect = error

        with pytest.raises(APIUnreachableError):
            api.retrieve_database(DATABASE_ID)

    def test_sanitize_credentials(self, api):
        """Tokens never appear in error text."""
        text = api._sanitize_credentials("Bearer ntn_abcdef123456 failed for secret_abcdefgh1234")

        assert "ntn_abcdef123456" not in text
        assert "secret_abcdefgh1234" not in text


class TestEndpoints:
    """Test cases for the typed fetch methods."""

    def test_fetch_collection(self, api, session):
        """The database resolves to its first data source schema."""
        session.request.side_effect = [
            _response(200, database(title="Tasks")),
            _response(200, data_source()),
        ]

        schema = api.fetch_collection(DATABASE_ID)

        assert schema.database_id == DATABASE_ID
        assert schema.data_source_id == DATA_SOURCE_ID
        assert schema.title == "Tasks"
        urls = [c.args[1] for c in session.request.call_args_list]
        assert urls[0].endswith(f"/databases/{DATABASE_ID}")
        assert urls[1].endswith(f"/data_sources/{DATA_SOURCE_ID}")

    def test_linked_database(self, api, session):
        """A database without data sources is rejected."""
        session.request.return_value = _response(200, database(data_source_ids=[]))

        with pytest.raises(LinkedDatabaseError):
            api.fetch_collection(DATABASE_ID)

    def test_fetch_rows_paginates(self, api, session):
        """Rows across pages come back in query order, with the cursor sent."""
        session.request.side_effect = [
            _response(200, list_response([page_row("r1", "A")], next_cursor="c1")),
            _response(200, list_response([page_row("r2", "B")])),
        ]

        rows = api.fetch_rows(DATA_SOURCE_ID)

        assert [row.title for row in rows] == ["A", "B"]
        first, second = session.request.call_args_list
        assert first.args[0] == "POST"
        assert first.kwargs["json"] == {"page_size": 100}
        assert second.kwargs["json"] == {"page_size": 100, "start_cursor": "c1"}

    def test_fetch_rows_ignores_non_pages(self, api, session):
        """Only page objects are rows."""
        session.request.return_value = _response(200, list_response([
            page_row("r1", "A"),
            {"object": "data_source", "id": "x"},
        ]))

        assert len(api.fetch_rows(DATA_SOURCE_ID)) == 1

    def test_fetch_blocks(self, api, session):
        """Block children are parsed in order."""
        session.request.return_value = _response(200, list_response([
            paragraph("one", "b1"),
            block("divider", "b2"),
        ]))

        nodes = api.fetch_blocks("page-1")

        assert [node.type for node in nodes] == ["paragraph", "divider"]
        assert session.request.call_args.kwargs["params"] == {"page_size": 100}
