# app/core/d1/executor.py
"""
QUERY EXECUTOR - Run one SQL statement against a database and get rows back

Purpose:
    1. Send a SQL statement (+ optional bind params) to the Cloudflare D1 HTTP query API
    2. Decode the JSON envelope into a list of rows
    3. Turn every failure into an ExecutionOutcome instead of a raw exception

Data Flow:
    SqlStatement → payload() → POST /accounts/{account}/d1/database/{db}/query
    → envelope → rows (first result set only) → ExecutionOutcome

The local executors in app/core/d1/local.py implement the same contract, so
the migration applier and the orchestrators never care where SQL runs.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from app.core.d1.errors import (
    ConfigError,
    DatabaseError,
    ExecutionError,
    RemoteError,
    SubprocessError,
    TransportError,
)

logger = logging.getLogger(__name__)

D1_API_BASE_URL = "https://api.cloudflare.com/client/v4"

Scalar = Union[str, int, float, bool, None]
Row = Dict[str, Any]
QueryResult = List[Row]


# ============================================================================
# DATA MODEL
# ============================================================================


@dataclass(frozen=True)
class SqlStatement:
    """
    One SQL string plus its ordered bind parameters.

    The parameter count is NOT checked against the placeholders - a mismatch
    comes back from the database as a normal execution failure.
    """

    sql: str
    params: Sequence[Scalar] = ()

    def payload(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"sql": self.sql}
        if self.params:
            body["params"] = list(self.params)
        return body


@dataclass
class ErrorDetail:
    kind: str
    message: str
    status: Optional[int] = None
    errors: List[Any] = field(default_factory=list)
    body: str = ""
    returncode: Optional[int] = None

    @classmethod
    def from_exception(cls, error: ExecutionError) -> "ErrorDetail":
        return cls(
            kind=error.kind,
            message=str(error),
            status=getattr(error, "status", None),
            errors=list(getattr(error, "errors", []) or []),
            body=getattr(error, "body", "") or getattr(error, "stderr", ""),
            returncode=getattr(error, "returncode", None),
        )

    def to_exception(self) -> ExecutionError:
        """Rebuild the typed exception so callers can raise it."""
        if self.kind == "transport":
            return TransportError(self.message, status=self.status, body=self.body)
        if self.kind == "remote":
            return RemoteError(self.message, errors=self.errors)
        if self.kind == "subprocess":
            return SubprocessError(
                self.message, returncode=self.returncode, stderr=self.body
            )
        if self.kind == "database":
            return DatabaseError(self.message)
        if self.kind == "config":
            return ConfigError(self.message)
        return ExecutionError(self.message)


@dataclass
class ExecutionOutcome:
    """Success(rows) or Failure(ErrorDetail). Zero rows is still a success."""

    rows: QueryResult = field(default_factory=list)
    error: Optional[ErrorDetail] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return self.error.message if self.error else ""

    @classmethod
    def success(cls, rows: Optional[QueryResult] = None) -> "ExecutionOutcome":
        return cls(rows=list(rows or []))

    @classmethod
    def failure(cls, error: ExecutionError) -> "ExecutionOutcome":
        return cls(error=ErrorDetail.from_exception(error))

    def unwrap(self) -> QueryResult:
        if self.error is not None:
            raise self.error.to_exception()
        return self.rows


class QueryExecutor(ABC):
    """Anything that can run a single SqlStatement and report an outcome."""

    # Human readable target name used in script output
    target = "database"

    @abstractmethod
    async def execute(self, statement: SqlStatement) -> ExecutionOutcome:
        ...

    async def query(
        self, sql: str, params: Optional[Sequence[Scalar]] = None
    ) -> QueryResult:
        """Run `sql` and return rows, raising the typed error on failure."""
        outcome = await self.execute(SqlStatement(sql, tuple(params or ())))
        return outcome.unwrap()

    async def close(self) -> None:
        """Release whatever the executor holds. Most hold nothing."""


# ============================================================================
# REMOTE (CLOUDFLARE D1 HTTP API)
# ============================================================================


@dataclass(frozen=True)
class D1Credentials:
    api_token: str
    account_id: str
    database_id: str

    @property
    def masked_token(self) -> str:
        return f"{self.api_token[:10]}..."


class D1Executor(QueryExecutor):
    """
    Executes statements through the D1 REST query endpoint.

    Every call opens a fresh httpx.AsyncClient: no pooling, no retries and
    (unless `timeout` is given) no timeout.

    Limitation: D1 may answer a multi-statement call with several result sets,
    but only the FIRST one is returned. Send one statement per call.
    """

    target = "remote D1 database"

    def __init__(
        self,
        credentials: D1Credentials,
        base_url: str = D1_API_BASE_URL,
        verify: bool = True,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.verify = verify
        self.timeout = timeout
        self.transport = transport

    @property
    def url(self) -> str:
        return (
            f"{self.base_url}/accounts/{self.credentials.account_id}"
            f"/d1/database/{self.credentials.database_id}/query"
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.credentials.api_token}",
            "Content-Type": "application/json",
        }

    async def execute(self, statement: SqlStatement) -> ExecutionOutcome:
        try:
            rows = await self._send(statement)
        except ExecutionError as error:
            logger.error(f"Remote DB query error: {error}")
            return ExecutionOutcome.failure(error)
        return ExecutionOutcome.success(rows)

    async def _send(self, statement: SqlStatement) -> QueryResult:
        payload = statement.payload()

        # Diagnostics only, nothing below depends on these
        logger.info(f"Making request to: {self.url}")
        logger.info(f"Payload: {json.dumps(payload)}")
        logger.info(f"Token prefix: {self.credentials.masked_token}")

        try:
            async with httpx.AsyncClient(
                verify=self.verify, timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    self.url, json=payload, headers=self._headers()
                )
        except httpx.RequestError as error:
            raise TransportError(f"Request to {self.url} failed: {error}") from error

        body = response.text
        logger.info(f"Response status: {response.status_code}")
        logger.info(f"Response body: {body}")

        if not response.is_success:
            raise TransportError(
                f"HTTP error! status: {response.status_code}, body: {body}",
                status=response.status_code,
                body=body,
            )

        try:
            data = response.json()
        except ValueError as error:
            raise TransportError(
                f"Invalid JSON from D1 API: {body}",
                status=response.status_code,
                body=body,
            ) from error

        if not isinstance(data, dict):
            raise TransportError(
                f"Unexpected D1 API format: {type(data).__name__}",
                status=response.status_code,
                body=body,
            )

        if not data.get("success"):
            errors = data.get("errors") or []
            raise RemoteError(f"D1 API error: {json.dumps(errors)}", errors=errors)

        result = data.get("result") or []
        if not result:
            logger.info("No results returned")
            return []

        first = result[0] if isinstance(result, list) else None
        if not isinstance(first, dict):
            raise TransportError(
                f"Unexpected D1 API format: result entry is {type(first).__name__}",
                status=response.status_code,
                body=body,
            )

        rows = first.get("results") or []
        if not isinstance(rows, list):
            raise TransportError(
                f"Unexpected D1 API format: results is {type(rows).__name__}",
                status=response.status_code,
                body=body,
            )
        return list(rows)
