import json
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import requests
from loguru import logger


class LedgerError(RuntimeError):
    """Base class for failures talking to the ledger store."""


class LedgerTransportError(LedgerError):
    """The store could not be reached or answered with a non-2xx status."""


class LedgerQueryError(LedgerError):
    """The store answered but reported errors for the query."""


def get_connection_params() -> Dict[str, Any]:
    return {
        "url": os.getenv("GRAPHQL_URL", "http://localhost:8080/v1/graphql"),
        "admin_secret": os.getenv("HASURA_ADMIN_SECRET", "testing"),
        "timeout": float(os.getenv("GRAPHQL_TIMEOUT_SECONDS", "60")),
    }


class LedgerClient:
    """Thin GraphQL client for the Hasura endpoint in front of the ledger."""

    def __init__(
        self,
        url: str,
        admin_secret: Optional[str] = None,
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if admin_secret:
            self.session.headers["x-hasura-admin-secret"] = admin_secret

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run a GraphQL query and return its ``data`` object.

        Raises:
            LedgerTransportError: connection failure, timeout or non-2xx response
            LedgerQueryError: the response carries ``errors`` or no ``data``
        """
        payload = {"query": query, "variables": variables or {}}
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise LedgerTransportError(f"GraphQL request to {self.url} failed: {e}") from e

        if not response.ok:
            raise LedgerTransportError(f"GraphQL error: {response.status_code} {response.reason}")

        try:
            body = response.json()
        except ValueError as e:
            raise LedgerQueryError(f"GraphQL response is not valid JSON: {e}") from e

        if body.get("errors"):
            raise LedgerQueryError(f"GraphQL errors: {json.dumps(body['errors'])}")

        data = body.get("data")
        if data is None:
            raise LedgerQueryError("GraphQL response has no data")

        return data

    def close(self):
        self.session.close()


class ClientFactory:

    def __init__(self, connection_params: Dict[str, Any]):
        self.connection_params = connection_params

    def create_client(self) -> LedgerClient:
        return LedgerClient(
            url=self.connection_params["url"],
            admin_secret=self.connection_params.get("admin_secret"),
            timeout=self.connection_params.get("timeout", 60.0),
        )

    @contextmanager
    def client_context(self) -> Iterator[LedgerClient]:
        client = self.create_client()
        logger.debug(f"Opened ledger client for {client.url}")
        try:
            yield client
        finally:
            client.close()
