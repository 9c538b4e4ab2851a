"""
Document collections used by the service layer.

``Collection`` is the capability interface the services depend on:
create, find, find-one, find-one-and-update and find-one-and-delete
over plain ``dict`` documents.  ``SQLiteCollection`` implements it on
top of ``core.db``; tests substitute an in-memory fake.

Filters are equality matches on every given key (``{"username": u,
"password": p}`` matches rows where both columns match).  ``exclude``
drops fields from returned documents, which is how the user service
keeps the credential out of every result.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .db import get_connection, init_db


Document = Dict[str, Any]
SortSpec = Sequence[Tuple[str, int]]

ASCENDING = 1
DESCENDING = -1


class Collection:
    """Capability interface over a single collection of documents."""

    name: str = ""

    async def create(self, document: Document) -> Document:
        raise NotImplementedError

    async def find(
        self,
        filters: Optional[Document] = None,
        sort: Optional[SortSpec] = None,
        exclude: Iterable[str] = (),
    ) -> List[Document]:
        raise NotImplementedError

    async def find_one(self, filters: Document, exclude: Iterable[str] = ()) -> Optional[Document]:
        raise NotImplementedError

    async def find_one_and_update(
        self, filters: Document, updates: Document, exclude: Iterable[str] = ()
    ) -> Optional[Document]:
        """Apply ``updates`` to the first match and return it after the update."""
        raise NotImplementedError

    async def find_one_and_delete(self, filters: Document, exclude: Iterable[str] = ()) -> Optional[Document]:
        """Remove the first match and return it as it was before removal."""
        raise NotImplementedError


def project(document: Document, exclude: Iterable[str] = ()) -> Document:
    """Return a copy of ``document`` without the ``exclude`` keys."""
    skipped = set(exclude)
    return {key: value for key, value in document.items() if key not in skipped}


class SQLiteCollection(Collection):
    """``Collection`` backed by one SQLite table.

    ``fields`` lists the table's columns other than ``id``.  Column
    names are interpolated into SQL, so every key coming from a filter,
    sort or update is checked against this list first.
    """

    def __init__(self, name: str, fields: Sequence[str], database_url: Optional[str] = None) -> None:
        self.name = name
        self.fields = tuple(fields)
        self.columns = ("id",) + self.fields
        self.database_url = database_url
        self.logger = logging.getLogger(__name__)

    def _check_keys(self, keys: Iterable[str]) -> List[str]:
        keys = list(keys)
        unknown = [key for key in keys if key not in self.columns]
        if unknown:
            raise ValueError(f"Unknown field(s) for {self.name}: {', '.join(unknown)}")
        return keys

    def _where(self, filters: Optional[Document]) -> Tuple[str, List[Any]]:
        if not filters:
            return "", []
        keys = self._check_keys(filters.keys())
        clause = " AND ".join(f"{key} = ?" for key in keys)
        return f" WHERE {clause}", [filters[key] for key in keys]

    @staticmethod
    def _serialize(value: Any) -> Any:
        # datetimes are stored as ISO text
        if hasattr(value, "isoformat"):
            return value.isoformat()
        return value

    async def create(self, document: Document) -> Document:
        keys = self._check_keys(key for key in document.keys() if key != "id")
        record = {"id": uuid.uuid4().hex}
        record.update({key: self._serialize(document[key]) for key in keys})
        columns = ", ".join(record.keys())
        placeholders = ", ".join("?" for _ in record)
        conn = get_connection(self.database_url)
        try:
            conn.execute(
                f"INSERT INTO {self.name} ({columns}) VALUES ({placeholders})",
                tuple(record.values()),
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        self.logger.debug("Inserted %s into %s", record["id"], self.name)
        return record

    async def find(
        self,
        filters: Optional[Document] = None,
        sort: Optional[SortSpec] = None,
        exclude: Iterable[str] = (),
    ) -> List[Document]:
        where, params = self._where(filters)
        order = ""
        if sort:
            self._check_keys(field for field, _ in sort)
            order = " ORDER BY " + ", ".join(
                f"{field} {'DESC' if direction == DESCENDING else 'ASC'}" for field, direction in sort
            )
        conn = get_connection(self.database_url)
        try:
            rows = conn.execute(
                f"SELECT {', '.join(self.columns)} FROM {self.name}{where}{order}", params
            ).fetchall()
            return [project(dict(row), exclude) for row in rows]
        finally:
            conn.close()

    async def find_one(self, filters: Document, exclude: Iterable[str] = ()) -> Optional[Document]:
        where, params = self._where(filters)
        conn = get_connection(self.database_url)
        try:
            row = conn.execute(
                f"SELECT {', '.join(self.columns)} FROM {self.name}{where} LIMIT 1", params
            ).fetchone()
            return project(dict(row), exclude) if row else None
        finally:
            conn.close()

    async def find_one_and_update(
        self, filters: Document, updates: Document, exclude: Iterable[str] = ()
    ) -> Optional[Document]:
        where, params = self._where(filters)
        keys = self._check_keys(key for key in updates.keys() if key != "id")
        conn = get_connection(self.database_url)
        try:
            row = conn.execute(f"SELECT id FROM {self.name}{where} LIMIT 1", params).fetchone()
            if not row:
                return None
            if keys:
                assignments = ", ".join(f"{key} = ?" for key in keys)
                conn.execute(
                    f"UPDATE {self.name} SET {assignments} WHERE id = ?",
                    [self._serialize(updates[key]) for key in keys] + [row["id"]],
                )
                conn.commit()
            updated = conn.execute(
                f"SELECT {', '.join(self.columns)} FROM {self.name} WHERE id = ?", (row["id"],)
            ).fetchone()
            return project(dict(updated), exclude)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    async def find_one_and_delete(self, filters: Document, exclude: Iterable[str] = ()) -> Optional[Document]:
        where, params = self._where(filters)
        conn = get_connection(self.database_url)
        try:
            row = conn.execute(
                f"SELECT {', '.join(self.columns)} FROM {self.name}{where} LIMIT 1", params
            ).fetchone()
            if not row:
                return None
            conn.execute(f"DELETE FROM {self.name} WHERE id = ?", (row["id"],))
            conn.commit()
            return project(dict(row), exclude)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


USER_FIELDS = ("username", "password", "dateJoined")
MESSAGE_FIELDS = ("msg", "msgFrom", "msgDateTime")


@dataclass
class Store:
    """The two collections the API works with."""

    users: Collection
    messages: Collection
    database_url: Optional[str] = None

    @classmethod
    def sqlite(cls, database_url: Optional[str] = None) -> "Store":
        return cls(
            users=SQLiteCollection("users", USER_FIELDS, database_url),
            messages=SQLiteCollection("messages", MESSAGE_FIELDS, database_url),
            database_url=database_url,
        )

    def init(self) -> None:
        """Apply migrations when both collections live in SQLite."""
        if isinstance(self.users, SQLiteCollection) and isinstance(self.messages, SQLiteCollection):
            version = init_db(self.database_url)
            logging.getLogger(__name__).info("Database schema at version %s", version)
