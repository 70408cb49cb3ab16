"""Port for the hierarchical document store holding slot and reservation state."""

from typing import Any


def split_path(path: str) -> tuple[str, ...]:
    """
    Normalise a ``/``-separated key path into its segments.

    ``"/reservations/01/"`` and ``"reservations/01"`` both yield
    ``("reservations", "01")``.
    """
    segments = tuple(segment for segment in path.split("/") if segment)
    if not segments:
        raise ValueError("document path must not be empty")
    return segments


class DocumentStore:
    """
    Keyed, hierarchical document store.

    Reading a parent path returns its children as a nested mapping. Each
    call is atomic for its own path only; there are no cross-path
    transactions.
    """

    async def get(self, path: str) -> Any | None:
        raise NotImplementedError

    async def set(self, path: str, value: Any) -> None:
        raise NotImplementedError

    async def update(self, path: str, fields: dict[str, Any]) -> None:
        """Merge ``fields`` into the mapping at ``path``, creating it if absent."""
        raise NotImplementedError

    async def remove(self, path: str) -> None:
        raise NotImplementedError

    async def ping(self) -> None:
        """Raise if the store is unreachable."""
        raise NotImplementedError
