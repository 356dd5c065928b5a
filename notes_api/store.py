"""Note store backends.

Three interchangeable implementations of the same async interface:

* ``MemoryNoteStore`` keeps notes in a process-local list.
* ``SqlNoteStore`` talks to PostgreSQL through a SQLAlchemy async engine.
* ``RestNoteStore`` talks to a hosted PostgREST-style data service over HTTP.

None of them caches or retries. Remote failures surface as ``StoreError``;
blank titles or contents are rejected with ``ValidationError`` before any
remote call is made. Ids are assigned by the store itself (counter, sequence
or identity column), never derived from the client clock.
"""

from __future__ import annotations

import itertools
import logging
import re
from typing import Any, Optional, Protocol

import httpx
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from notes_api.config import Settings
from notes_api.errors import NoteNotFoundError, StoreError
from notes_api.models import Note, display_date, validate_note_fields

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _check_table_name(table: str) -> str:
    """Reject table names that are not plain SQL identifiers."""
    if not _IDENTIFIER.fullmatch(table):
        raise ValueError(f"Invalid table name: {table!r}")
    return table


class NoteStore(Protocol):
    """Interface shared by every note store backend."""

    name: str

    async def init(self) -> None: ...

    async def close(self) -> None: ...

    async def list_notes(self) -> list[Note]: ...

    async def create(self, title: str, content: str) -> Note: ...

    async def update(self, note_id: int, title: str, content: str) -> Note: ...

    async def delete(self, note_id: int) -> None: ...


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


class MemoryNoteStore:
    """Process-local note store. State is lost on restart."""

    name = "memory"

    def __init__(self, notes: list[Note] | None = None) -> None:
        self._notes: list[Note] = list(notes or [])
        next_id = max((n.id for n in self._notes), default=0) + 1
        self._ids = itertools.count(next_id)

    async def init(self) -> None:
        logger.info("In-memory note store ready with %d notes", len(self._notes))

    async def close(self) -> None:
        pass

    async def list_notes(self) -> list[Note]:
        """Return every note, newest first."""
        return sorted(self._notes, key=lambda n: (n.created_at, n.id), reverse=True)

    async def create(self, title: str, content: str) -> Note:
        validate_note_fields(title, content)
        note = Note(id=next(self._ids), title=title, content=content, date=display_date())
        self._notes.append(note)
        logger.info("Created note %d — '%s'", note.id, note.title)
        return note

    async def update(self, note_id: int, title: str, content: str) -> Note:
        validate_note_fields(title, content)
        for i, note in enumerate(self._notes):
            if note.id == note_id:
                updated = note.model_copy(
                    update={"title": title, "content": content, "date": display_date()}
                )
                self._notes[i] = updated
                logger.info("Updated note %d", note_id)
                return updated
        raise NoteNotFoundError(note_id)

    async def delete(self, note_id: int) -> None:
        """Remove a note. Deleting an unknown id is a no-op."""
        remaining = [n for n in self._notes if n.id != note_id]
        if len(remaining) == len(self._notes):
            logger.info("Delete of missing note %d ignored", note_id)
            return
        self._notes = remaining
        logger.info("Deleted note %d", note_id)


# ---------------------------------------------------------------------------
# PostgreSQL
# ---------------------------------------------------------------------------

_COLUMNS = "id, title, content, date, created_at"


def _row_to_note(row: Any) -> Note:
    return Note(id=row[0], title=row[1], content=row[2], date=row[3], created_at=row[4])


class SqlNoteStore:
    """PostgreSQL note store using a SQLAlchemy async engine.

    PostgreSQL being unreachable at startup is not fatal: a warning is logged
    and every later operation raises ``StoreError``.
    """

    name = "sql"

    def __init__(
        self, database_url: str, table: str = "notes", timeout: float = 5.0
    ) -> None:
        self._url = database_url
        self._table = _check_table_name(table)
        self._timeout = timeout
        self._engine: Optional[AsyncEngine] = None

    @property
    def available(self) -> bool:
        """Whether the PostgreSQL connection is active."""
        return self._engine is not None

    def _create_table_stmts(self) -> list[str]:
        t = self._table
        return [
            f"""CREATE TABLE IF NOT EXISTS {t} (
                id BIGSERIAL PRIMARY KEY,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                date TEXT NOT NULL,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )""",
            f"CREATE INDEX IF NOT EXISTS idx_{t}_created ON {t}(created_at)",
        ]

    async def init(self) -> None:
        """Create engine, connection pool, and the notes table."""
        try:
            self._engine = create_async_engine(
                self._url,
                pool_size=5,
                max_overflow=10,
                pool_timeout=self._timeout,
                connect_args={"timeout": self._timeout, "command_timeout": self._timeout},
            )
            async with self._engine.begin() as conn:
                for stmt in self._create_table_stmts():
                    await conn.execute(text(stmt))
            logger.info("PostgreSQL connected — table '%s' ready", self._table)
        except Exception as e:
            logger.warning("PostgreSQL unavailable, note store disabled: %s", e)
            self._engine = None

    async def close(self) -> None:
        """Dispose of the engine and connection pool."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None

    def _require_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StoreError("Database unavailable")
        return self._engine

    def _failure(self, action: str, e: Exception) -> StoreError:
        """Log a failed query and turn it into a StoreError."""
        if isinstance(e, TimeoutError) or isinstance(getattr(e, "orig", None), TimeoutError):
            logger.error("Database timed out after %.1fs: %s", self._timeout, action)
            return StoreError(f"Failed to {action}: database timed out after {self._timeout}s")
        logger.error("Failed to %s: %s", action, e)
        return StoreError(f"Failed to {action}: {e}")

    async def list_notes(self) -> list[Note]:
        engine = self._require_engine()
        try:
            async with engine.connect() as conn:
                result = await conn.execute(
                    text(
                        f"SELECT {_COLUMNS} FROM {self._table} "
                        "ORDER BY created_at DESC, id DESC"
                    )
                )
                rows = result.fetchall()
        except (SQLAlchemyError, OSError) as e:
            raise self._failure("list notes", e) from e
        return [_row_to_note(row) for row in rows]

    async def create(self, title: str, content: str) -> Note:
        validate_note_fields(title, content)
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                result = await conn.execute(
                    text(
                        f"INSERT INTO {self._table} (title, content, date, created_at) "
                        "VALUES (:title, :content, :date, NOW()) "
                        f"RETURNING {_COLUMNS}"
                    ),
                    {"title": title, "content": content, "date": display_date()},
                )
                row = result.fetchone()
        except (SQLAlchemyError, OSError) as e:
            raise self._failure("create note", e) from e
        if row is None:
            raise StoreError("Insert returned no row")
        note = _row_to_note(row)
        logger.info("Created note %d — '%s'", note.id, note.title)
        return note

    async def update(self, note_id: int, title: str, content: str) -> Note:
        validate_note_fields(title, content)
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                result = await conn.execute(
                    text(
                        f"UPDATE {self._table} "
                        "SET title = :title, content = :content, date = :date "
                        f"WHERE id = :id RETURNING {_COLUMNS}"
                    ),
                    {
                        "id": note_id,
                        "title": title,
                        "content": content,
                        "date": display_date(),
                    },
                )
                row = result.fetchone()
        except (SQLAlchemyError, OSError) as e:
            raise self._failure(f"update note {note_id}", e) from e
        if row is None:
            raise NoteNotFoundError(note_id)
        logger.info("Updated note %d", note_id)
        return _row_to_note(row)

    async def delete(self, note_id: int) -> None:
        """Delete a note by id. Deleting an unknown id is a no-op."""
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                result = await conn.execute(
                    text(f"DELETE FROM {self._table} WHERE id = :id"),
                    {"id": note_id},
                )
        except (SQLAlchemyError, OSError) as e:
            raise self._failure(f"delete note {note_id}", e) from e
        if result.rowcount == 0:
            logger.info("Delete of missing note %d ignored", note_id)
        else:
            logger.info("Deleted note %d", note_id)


# ---------------------------------------------------------------------------
# Hosted data service (PostgREST)
# ---------------------------------------------------------------------------

_RETURN_ROWS = "return=representation"


def _error_message(resp: httpx.Response) -> str:
    """Pull a human-readable message out of an error response."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)


class RestNoteStore:
    """Note store backed by a hosted PostgREST data service.

    Authenticates with the service API key and issues one HTTP request per
    operation, bounded by ``timeout`` seconds.
    """

    name = "rest"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "notes",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._table = _check_table_name(table)
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def init(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/rest/v1",
            headers={
                "apikey": self._api_key,
                "Authorization": f"Bearer {self._api_key}",
            },
            timeout=self._timeout,
            transport=self._transport,
        )
        logger.info("Data service client ready: %s", self._base_url)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        prefer: str | None = None,
    ) -> Any:
        """Send one request to the notes collection and return parsed JSON."""
        if self._client is None:
            raise StoreError("Data service client is not initialised")

        headers = {"Prefer": prefer} if prefer else None
        try:
            resp = await self._client.request(
                method, f"/{self._table}", params=params, json=json, headers=headers
            )
        except httpx.TimeoutException as e:
            logger.error("Data service request timed out after %.1fs", self._timeout)
            raise StoreError(f"Data service timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            logger.error("Data service request failed: %s", e)
            raise StoreError(f"Data service request failed: {e}") from e

        if resp.is_error:
            message = _error_message(resp)
            logger.error("Data service returned %d: %s", resp.status_code, message)
            raise StoreError(f"Data service error ({resp.status_code}): {message}")

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise StoreError("Data service returned invalid JSON") from e

    @staticmethod
    def _to_notes(data: Any) -> list[Note]:
        if not isinstance(data, list):
            raise StoreError("Data service returned an unexpected payload")
        try:
            return [Note.model_validate(row) for row in data]
        except PydanticValidationError as e:
            raise StoreError(f"Data service returned a malformed note: {e}") from e

    async def list_notes(self) -> list[Note]:
        data = await self._request(
            "GET", params={"select": "*", "order": "created_at.desc,id.desc"}
        )
        return self._to_notes(data)

    async def create(self, title: str, content: str) -> Note:
        validate_note_fields(title, content)
        data = await self._request(
            "POST",
            json={"title": title, "content": content, "date": display_date()},
            prefer=_RETURN_ROWS,
        )
        notes = self._to_notes(data)
        if not notes:
            raise StoreError("Insert returned no row")
        logger.info("Created note %d — '%s'", notes[0].id, notes[0].title)
        return notes[0]

    async def update(self, note_id: int, title: str, content: str) -> Note:
        validate_note_fields(title, content)
        data = await self._request(
            "PATCH",
            params={"id": f"eq.{note_id}"},
            json={"title": title, "content": content, "date": display_date()},
            prefer=_RETURN_ROWS,
        )
        notes = self._to_notes(data)
        if not notes:
            raise NoteNotFoundError(note_id)
        logger.info("Updated note %d", note_id)
        return notes[0]

    async def delete(self, note_id: int) -> None:
        """Delete a note by id. Deleting an unknown id is a no-op."""
        data = await self._request(
            "DELETE", params={"id": f"eq.{note_id}"}, prefer=_RETURN_ROWS
        )
        if not data:
            logger.info("Delete of missing note %d ignored", note_id)
        else:
            logger.info("Deleted note %d", note_id)


def build_store(settings: Settings) -> NoteStore:
    """Instantiate the backend selected by ``settings.store_backend``."""
    if settings.store_backend == "sql":
        return SqlNoteStore(
            settings.database_url,
            table=settings.notes_table,
            timeout=settings.request_timeout,
        )
    if settings.store_backend == "rest":
        return RestNoteStore(
            settings.data_service_url,
            settings.data_service_key,
            table=settings.notes_table,
            timeout=settings.request_timeout,
        )
    return MemoryNoteStore()
