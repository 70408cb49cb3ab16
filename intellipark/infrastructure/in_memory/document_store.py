import copy
from typing import Any

from intellipark.application.interfaces.document_store import DocumentStore, split_path


class InMemoryDocumentStore(DocumentStore):
    """Nested-dict document store; values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.root: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def _parent(self, segments: tuple[str, ...], create: bool) -> dict[str, Any] | None:
        node = self.root
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                if not create:
                    return None
                child = {}
                node[segment] = child
            node = child
        return node

    async def get(self, path: str) -> Any | None:
        segments = split_path(path)
        parent = self._parent(segments, create=False)
        if parent is None:
            return None
        return copy.deepcopy(parent.get(segments[-1]))

    async def set(self, path: str, value: Any) -> None:
        segments = split_path(path)
        parent = self._parent(segments, create=True)
        if value is None:
            parent.pop(segments[-1], None)
            return
        parent[segments[-1]] = copy.deepcopy(value)

    async def update(self, path: str, fields: dict[str, Any]) -> None:
        segments = split_path(path)
        parent = self._parent(segments, create=True)
        current = parent.get(segments[-1])
        if not isinstance(current, dict):
            current = {}
        current.update(copy.deepcopy(fields))
        parent[segments[-1]] = current

    async def remove(self, path: str) -> None:
        segments = split_path(path)
        parent = self._parent(segments, create=False)
        if parent is not None:
            parent.pop(segments[-1], None)

    async def ping(self) -> None:
        return None
