"""
Unit tests for the GraphQL ledger client.

The HTTP session is mocked; no endpoint is contacted.
"""

from unittest.mock import Mock

import pytest
import requests

from flow_pipeline.storage.client import (
    ClientFactory,
    LedgerClient,
    LedgerQueryError,
    LedgerTransportError,
    get_connection_params,
)


def _response(status_code=200, body=None, reason="OK"):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    response.json.return_value = body
    return response


@pytest.fixture
def session():
    session = Mock()
    session.headers = {}
    return session


class TestLedgerClient:

    def test_returns_data(self, session):
        session.post.return_value = _response(body={"data": {"Transfer": []}})
        client = LedgerClient("http://ledger/v1/graphql", admin_secret="s3cret", timeout=5, session=session)

        data = client.execute("query X { Transfer { value } }", {"limit": 1})

        assert data == {"Transfer": []}
        session.post.assert_called_once_with(
            "http://ledger/v1/graphql",
            json={"query": "query X { Transfer { value } }", "variables": {"limit": 1}},
            timeout=5,
        )
        assert session.headers["x-hasura-admin-secret"] == "s3cret"

    def test_graphql_errors_raise_query_error(self, session):
        session.post.return_value = _response(body={"errors": [{"message": "field 'nope' not found"}]})
        client = LedgerClient("http://ledger", session=session)

        with pytest.raises(LedgerQueryError, match="nope"):
            client.execute("query X { nope }")

    def test_missing_data_raises_query_error(self, session):
        session.post.return_value = _response(body={})
        client = LedgerClient("http://ledger", session=session)

        with pytest.raises(LedgerQueryError):
            client.execute("query X { Transfer { value } }")

    def test_http_status_raises_transport_error(self, session):
        session.post.return_value = _response(status_code=503, reason="Service Unavailable")
        client = LedgerClient("http://ledger", session=session)

        with pytest.raises(LedgerTransportError, match="503"):
            client.execute("query X { Transfer { value } }")

    def test_connection_failure_raises_transport_error(self, session):
        session.post.side_effect = requests.ConnectionError("connection refused")
        client = LedgerClient("http://ledger", session=session)

        with pytest.raises(LedgerTransportError, match="connection refused"):
            client.execute("query X { Transfer { value } }")


class TestClientFactory:

    def test_connection_params_from_env(self, monkeypatch):
        monkeypatch.setenv("GRAPHQL_URL", "http://indexer:8080/v1/graphql")
        monkeypatch.setenv("HASURA_ADMIN_SECRET", "admin")
        monkeypatch.setenv("GRAPHQL_TIMEOUT_SECONDS", "15")

        params = get_connection_params()

        assert params == {"url": "http://indexer:8080/v1/graphql", "admin_secret": "admin", "timeout": 15.0}

    def test_client_context_closes_session(self):
        factory = ClientFactory({"url": "http://ledger", "admin_secret": "x", "timeout": 1.0})

        with factory.client_context() as client:
            client.session = Mock()
            session = client.session

        session.close.assert_called_once()
