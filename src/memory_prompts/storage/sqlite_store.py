from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from ..config import DEFAULT_DB_DIR
from ..exceptions import CategoryConflictError, PersistenceError
from ..types import BulkWriteResult, Category, Event, Prompt, _id

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS categories (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    parent_id TEXT REFERENCES categories(id)
);
CREATE TABLE IF NOT EXISTS prompts (
    id TEXT PRIMARY KEY,
    text TEXT NOT NULL CHECK (length(text) > 0),
    language TEXT NOT NULL,
    keywords TEXT NOT NULL DEFAULT '[]',
    subcategories TEXT NOT NULL DEFAULT '[]',
    source TEXT NOT NULL,
    model TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS prompt_categories (
    prompt_id TEXT NOT NULL REFERENCES prompts(id),
    category_id TEXT NOT NULL REFERENCES categories(id),
    PRIMARY KEY (prompt_id, category_id)
);
CREATE TABLE IF NOT EXISTS events (
    id TEXT PRIMARY KEY,
    prompt_id TEXT NOT NULL REFERENCES prompts(id),
    type TEXT NOT NULL CHECK (type IN ('fetched', 'used')),
    metadata TEXT,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_categories_parent ON categories(parent_id);
CREATE INDEX IF NOT EXISTS idx_prompt_categories_category ON prompt_categories(category_id);
CREATE INDEX IF NOT EXISTS idx_events_prompt ON events(prompt_id);
CREATE INDEX IF NOT EXISTS idx_prompts_created ON prompts(created_at);
"""

_PROMPT_INSERT = (
    "INSERT INTO prompts (id, text, language, keywords, subcategories, source, model, created_at) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)"
)


def _ts(dt: datetime) -> str:
    return dt.isoformat()


def _parse_ts(s: str) -> datetime:
    dt = datetime.fromisoformat(s)
    return dt.astimezone(timezone.utc) if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


# stay under SQLite's bound-parameter limit
_IN_CHUNK = 500


def _chunks(ids: list[str], size: int = _IN_CHUNK) -> list[list[str]]:
    return [ids[i:i + size] for i in range(0, len(ids), size)]


def _row_to_category(row: aiosqlite.Row) -> Category:
    return Category(id=row["id"], name=row["name"], parent_id=row["parent_id"])


def _row_to_prompt(row: aiosqlite.Row, categories: list[str]) -> Prompt:
    return Prompt(
        id=row["id"],
        text=row["text"],
        language=row["language"],
        keywords=json.loads(row["keywords"]),
        categories=categories,
        subcategories=json.loads(row["subcategories"]),
        source=row["source"],
        model=row["model"],
        created_at=_parse_ts(row["created_at"]),
    )


def _row_to_event(row: aiosqlite.Row) -> Event:
    return Event(
        id=row["id"],
        prompt_id=row["prompt_id"],
        type=row["type"],
        metadata=json.loads(row["metadata"]) if row["metadata"] is not None else None,
        created_at=_parse_ts(row["created_at"]),
    )


class SQLiteStore:
    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            db_path = DEFAULT_DB_DIR / "prompts.db"
        if str(db_path) != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db_path = str(db_path)
        self._db: aiosqlite.Connection | None = None
        self._connect_lock = asyncio.Lock()
        # statement sequences on the shared connection never interleave
        self._lock = asyncio.Lock()

    async def _conn(self) -> aiosqlite.Connection:
        async with self._connect_lock:
            if self._db is None:
                self._db = await self._open()
        return self._db

    async def _open(self) -> aiosqlite.Connection:
        try:
            db = await aiosqlite.connect(self._db_path)
        except sqlite3.Error as exc:
            raise PersistenceError(f"Unable to open prompt store at {self._db_path}") from exc
        try:
            db.row_factory = aiosqlite.Row
            await db.execute("PRAGMA journal_mode=WAL")
            await db.execute("PRAGMA foreign_keys=ON")
            await db.executescript(SCHEMA)
            await db.commit()
        except sqlite3.Error as exc:
            await db.close()
            raise PersistenceError(f"Unable to initialise prompt store at {self._db_path}") from exc
        return db

    async def close(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None

    async def __aenter__(self) -> SQLiteStore:
        await self._conn()
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    # ── Categories ──

    async def get_category_by_name(self, name: str) -> Category | None:
        db = await self._conn()
        async with self._lock:
            cur = await db.execute("SELECT * FROM categories WHERE name = ?", (name,))
            row = await cur.fetchone()
        return _row_to_category(row) if row else None

    async def create_category(self, name: str, parent_id: str | None = None) -> Category:
        db = await self._conn()
        category = Category(id=_id(), name=name, parent_id=parent_id)
        async with self._lock:
            try:
                await db.execute(
                    "INSERT INTO categories (id, name, parent_id) VALUES (?, ?, ?)",
                    (category.id, category.name, category.parent_id),
                )
                await db.commit()
            except sqlite3.IntegrityError as exc:
                await db.rollback()
                if "UNIQUE" in str(exc).upper():
                    raise CategoryConflictError(name) from exc
                raise PersistenceError(f"Unable to create category {name!r}") from exc
            except sqlite3.Error as exc:
                await db.rollback()
                raise PersistenceError(f"Unable to create category {name!r}") from exc
        return category

    async def list_root_categories(self) -> list[Category]:
        db = await self._conn()
        async with self._lock:
            cur = await db.execute("SELECT * FROM categories WHERE parent_id IS NULL ORDER BY rowid")
            roots = [_row_to_category(row) async for row in cur]
            by_id = {c.id: c for c in roots}
            for chunk in _chunks(list(by_id)):
                placeholders = ",".join("?" * len(chunk))
                cur = await db.execute(
                    f"SELECT * FROM categories WHERE parent_id IN ({placeholders}) ORDER BY rowid",
                    chunk,
                )
                async for row in cur:
                    by_id[row["parent_id"]].children.append(_row_to_category(row))
        return roots

    # ── Prompts ──

    async def _insert_prompt(self, db: aiosqlite.Connection, prompt: Prompt, category_ids: list[str]) -> None:
        await db.execute(
            _PROMPT_INSERT,
            (
                prompt.id, prompt.text, prompt.language,
                json.dumps(prompt.keywords, ensure_ascii=False),
                json.dumps(prompt.subcategories, ensure_ascii=False),
                prompt.source, prompt.model, _ts(prompt.created_at),
            ),
        )
        await db.executemany(
            "INSERT INTO prompt_categories (prompt_id, category_id) VALUES (?, ?)",
            [(prompt.id, cid) for cid in dict.fromkeys(category_ids)],
        )

    async def save_prompt(self, prompt: Prompt, category_ids: list[str]) -> Prompt:
        db = await self._conn()
        async with self._lock:
            try:
                await self._insert_prompt(db, prompt, category_ids)
                await db.commit()
            except sqlite3.Error as exc:
                await db.rollback()
                raise PersistenceError(f"Unable to save prompt {prompt.id}") from exc
        return prompt

    async def save_prompts(self, prompts: list[Prompt], category_ids: list[str]) -> BulkWriteResult:
        """Unordered multi-insert: each record commits on its own and a failed
        record is reported without blocking the ones after it."""
        db = await self._conn()
        result = BulkWriteResult()
        async with self._lock:
            for prompt in prompts:
                try:
                    await self._insert_prompt(db, prompt, category_ids)
                    await db.commit()
                except sqlite3.Error as exc:
                    await db.rollback()
                    logger.warning("Bulk insert skipped prompt %s: %s", prompt.id, exc)
                    result.failed.append((prompt, PersistenceError(str(exc))))
                else:
                    result.inserted.append(prompt)
        return result

    async def _category_names(self, db: aiosqlite.Connection, prompt_ids: list[str]) -> dict[str, list[str]]:
        names: dict[str, list[str]] = defaultdict(list)
        for chunk in _chunks(prompt_ids):
            placeholders = ",".join("?" * len(chunk))
            cur = await db.execute(
                "SELECT pc.prompt_id, c.name FROM prompt_categories pc "
                "JOIN categories c ON c.id = pc.category_id "
                f"WHERE pc.prompt_id IN ({placeholders}) ORDER BY pc.rowid",
                chunk,
            )
            async for row in cur:
                names[row["prompt_id"]].append(row["name"])
        return names

    async def _hydrate(self, db: aiosqlite.Connection, rows: list[aiosqlite.Row]) -> list[Prompt]:
        names = await self._category_names(db, [row["id"] for row in rows])
        return [_row_to_prompt(row, names.get(row["id"], [])) for row in rows]

    async def get_prompt(self, prompt_id: str) -> Prompt | None:
        db = await self._conn()
        async with self._lock:
            cur = await db.execute("SELECT * FROM prompts WHERE id = ?", (prompt_id,))
            row = await cur.fetchone()
            if not row:
                return None
            return (await self._hydrate(db, [row]))[0]

    async def get_prompts(
        self,
        category: str | None = None,
        *,
        with_events: bool = False,
        newest_first: bool = False,
    ) -> list[Prompt]:
        db = await self._conn()
        order = "DESC" if newest_first else "ASC"
        async with self._lock:
            if category:
                cur = await db.execute(
                    "SELECT * FROM prompts WHERE id IN ("
                    "SELECT pc.prompt_id FROM prompt_categories pc "
                    "JOIN categories c ON c.id = pc.category_id WHERE c.name = ?) "
                    f"ORDER BY created_at {order}, rowid {order}",
                    (category,),
                )
            else:
                cur = await db.execute(f"SELECT * FROM prompts ORDER BY created_at {order}, rowid {order}")
            prompts = await self._hydrate(db, await cur.fetchall())
            if with_events and prompts:
                events = await self._events_for(db, [p.id for p in prompts])
                for prompt in prompts:
                    prompt.events = events.get(prompt.id, [])
        return prompts

    async def search_prompts_by_keyword(self, keyword: str) -> list[Prompt]:
        db = await self._conn()
        async with self._lock:
            cur = await db.execute(
                "SELECT * FROM prompts WHERE EXISTS ("
                "SELECT 1 FROM json_each(prompts.keywords) WHERE json_each.value = ?) "
                "ORDER BY created_at, rowid",
                (keyword,),
            )
            return await self._hydrate(db, await cur.fetchall())

    # ── Events ──

    async def save_event(self, event: Event) -> Event:
        db = await self._conn()
        async with self._lock:
            try:
                await db.execute(
                    "INSERT INTO events (id, prompt_id, type, metadata, created_at) VALUES (?, ?, ?, ?, ?)",
                    (
                        event.id, event.prompt_id, event.type,
                        json.dumps(event.metadata, ensure_ascii=False) if event.metadata is not None else None,
                        _ts(event.created_at),
                    ),
                )
                await db.commit()
            except sqlite3.Error as exc:
                await db.rollback()
                raise PersistenceError(f"Unable to record event for prompt {event.prompt_id}") from exc
        return event

    async def _events_for(self, db: aiosqlite.Connection, prompt_ids: list[str]) -> dict[str, list[Event]]:
        events: dict[str, list[Event]] = defaultdict(list)
        for chunk in _chunks(prompt_ids):
            placeholders = ",".join("?" * len(chunk))
            cur = await db.execute(
                f"SELECT * FROM events WHERE prompt_id IN ({placeholders}) ORDER BY created_at, rowid",
                chunk,
            )
            async for row in cur:
                events[row["prompt_id"]].append(_row_to_event(row))
        return events

    async def get_events(self, prompt_id: str) -> list[Event]:
        db = await self._conn()
        async with self._lock:
            return (await self._events_for(db, [prompt_id])).get(prompt_id, [])
