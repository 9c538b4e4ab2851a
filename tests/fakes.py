"""In-memory stand-ins for the collections and the notification channel."""
import itertools
from typing import Any, Dict, List

from chat_api.app.core.notifications import NotificationChannel
from chat_api.app.core.store import DESCENDING, Collection, project


class InMemoryCollection(Collection):
    """Dict-backed stand-in for a SQLite collection."""

    _ids = itertools.count(1)

    def __init__(self, name: str = "memory") -> None:
        self.name = name
        self.documents: List[Dict[str, Any]] = []

    @staticmethod
    def _matches(document, filters) -> bool:
        return all(document.get(key) == value for key, value in (filters or {}).items())

    async def create(self, document):
        record = dict(document, id=f"{self.name}-{next(self._ids)}")
        self.documents.append(record)
        return dict(record)

    async def find(self, filters=None, sort=None, exclude=()):
        found = [d for d in self.documents if self._matches(d, filters)]
        for field, direction in reversed(list(sort or [])):
            found.sort(key=lambda d: d[field], reverse=direction == DESCENDING)
        return [project(d, exclude) for d in found]

    async def find_one(self, filters, exclude=()):
        for document in self.documents:
            if self._matches(document, filters):
                return project(document, exclude)
        return None

    async def find_one_and_update(self, filters, updates, exclude=()):
        for document in self.documents:
            if self._matches(document, filters):
                document.update(updates)
                return project(document, exclude)
        return None

    async def find_one_and_delete(self, filters, exclude=()):
        for document in self.documents:
            if self._matches(document, filters):
                self.documents.remove(document)
                return project(document, exclude)
        return None


class BrokenCollection(Collection):
    """Every call fails as if the database were unreachable."""

    name = "broken"

    async def _fail(self, *args, **kwargs):
        raise ConnectionError("database unreachable")

    create = find = find_one = find_one_and_update = find_one_and_delete = _fail


class NullCreateCollection(InMemoryCollection):
    """``create`` reports success without returning a record."""

    async def create(self, document):
        return None


class RecordingNotifier(NotificationChannel):
    def __init__(self) -> None:
        self.events: List[tuple] = []

    async def publish(self, event: str, payload: Dict[str, Any]) -> None:
        self.events.append((event, payload))




class FailingNotifier(NotificationChannel):
    async def publish(self, event: str, payload: Dict[str, Any]) -> None:
        raise ConnectionError("push channel down")
