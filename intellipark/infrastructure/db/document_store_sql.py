import copy
from typing import Any

from sqlalchemy import delete, insert, or_, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from intellipark.application.interfaces.document_store import DocumentStore, split_path
from intellipark.infrastructure.db.engine import session_scope
from intellipark.infrastructure.db.retry import with_deadlock_retry
from intellipark.infrastructure.db.tables import documents


def _join(segments: tuple[str, ...]) -> str:
    return "/".join(segments)


def _subtree_clause(key: str):
    return or_(
        documents.c.path == key,
        documents.c.path.startswith(f"{key}/", autoescape=True),
    )


class DocumentStoreSQL(DocumentStore):
    """
    Document store over a single ``documents`` table.

    Each row holds the JSON document written at one key path. Reading a
    path with no row of its own assembles its descendants into a nested
    mapping, or drills into the nearest ancestor document. Writes resolve
    the path the same way: a value living inside an ancestor document is
    rewritten in that document. Every call runs in its own short
    transaction.
    """

    def __init__(self, session_maker) -> None:
        self._session_maker = session_maker

    async def _fetch(self, session: AsyncSession, key: str) -> tuple[bool, Any]:
        result = await session.execute(select(documents.c.value).where(documents.c.path == key))
        row = result.first()
        if row is None:
            return False, None
        return True, row[0]

    async def _descendants(self, session: AsyncSession, key: str):
        result = await session.execute(
            select(documents.c.path, documents.c.value).where(
                documents.c.path.startswith(f"{key}/", autoescape=True)
            )
        )
        return result.all()

    async def _ancestor(
        self, session: AsyncSession, segments: tuple[str, ...]
    ) -> tuple[str, Any] | None:
        """Nearest ancestor row of ``segments`` as ``(path, value)``, if any."""
        ancestors = [_join(segments[:i]) for i in range(len(segments) - 1, 0, -1)]
        if not ancestors:
            return None
        result = await session.execute(
            select(documents.c.path, documents.c.value).where(documents.c.path.in_(ancestors))
        )
        found = {row.path: row.value for row in result}
        for ancestor in ancestors:
            if ancestor in found:
                return ancestor, found[ancestor]
        return None

    async def _replace(self, session: AsyncSession, key: str, value: Any) -> None:
        await session.execute(delete(documents).where(_subtree_clause(key)))
        await session.execute(insert(documents).values(path=key, value=value))

    async def _write_into_ancestor(
        self,
        session: AsyncSession,
        ancestor: str,
        document: Any,
        segments: tuple[str, ...],
        value: Any,
    ) -> None:
        remainder = segments[len(split_path(ancestor)):]
        rewritten = self._put(document, remainder, value)
        await session.execute(
            update(documents).where(documents.c.path == ancestor).values(value=rewritten)
        )

    @staticmethod
    def _assemble(depth: int, rows) -> dict[str, Any]:
        tree: dict[str, Any] = {}
        for row_path, value in sorted(rows, key=lambda r: r[0].count("/")):
            relative = split_path(row_path)[depth:]
            node = tree
            for segment in relative[:-1]:
                child = node.get(segment)
                if not isinstance(child, dict):
                    child = {}
                    node[segment] = child
                node = child
            leaf = node.get(relative[-1])
            if isinstance(leaf, dict) and isinstance(value, dict):
                merged = copy.deepcopy(value)
                merged.update(leaf)
                node[relative[-1]] = merged
            else:
                node[relative[-1]] = value
        return tree

    @staticmethod
    def _drill(value: Any, remainder: tuple[str, ...]) -> Any | None:
        for segment in remainder:
            if not isinstance(value, dict):
                return None
            value = value.get(segment)
        return value

    @staticmethod
    def _put(document: Any, remainder: tuple[str, ...], value: Any) -> dict[str, Any]:
        """Copy of ``document`` with ``value`` placed at ``remainder``; ``None`` removes it."""
        root = copy.deepcopy(document) if isinstance(document, dict) else {}
        node = root
        for segment in remainder[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                if value is None:
                    return root
                child = {}
                node[segment] = child
            node = child
        if value is None:
            node.pop(remainder[-1], None)
        else:
            node[remainder[-1]] = copy.deepcopy(value)
        return root

    @with_deadlock_retry()
    async def get(self, path: str) -> Any | None:
        segments = split_path(path)
        key = _join(segments)
        async with session_scope(self._session_maker) as session:
            exists, value = await self._fetch(session, key)
            if exists:
                return value

            rows = await self._descendants(session, key)
            if rows:
                return self._assemble(len(segments), rows)

            owner = await self._ancestor(session, segments)
            if owner is None:
                return None
            ancestor, document = owner
            return self._drill(document, segments[len(split_path(ancestor)):])

    @with_deadlock_retry()
    async def set(self, path: str, value: Any) -> None:
        segments = split_path(path)
        key = _join(segments)
        async with session_scope(self._session_maker) as session:
            owner = await self._ancestor(session, segments)
            if owner is not None:
                await session.execute(delete(documents).where(_subtree_clause(key)))
                await self._write_into_ancestor(session, *owner, segments, value)
            elif value is None:
                await session.execute(delete(documents).where(_subtree_clause(key)))
            else:
                await self._replace(session, key, value)

    @with_deadlock_retry()
    async def update(self, path: str, fields: dict[str, Any]) -> None:
        segments = split_path(path)
        key = _join(segments)
        async with session_scope(self._session_maker) as session:
            exists, current = await self._fetch(session, key)
            if exists:
                merged = dict(current) if isinstance(current, dict) else {}
                merged.update(fields)
                await session.execute(
                    update(documents).where(documents.c.path == key).values(value=merged)
                )
                return

            rows = await self._descendants(session, key)
            if rows:
                # fold the child rows into one document at this path
                merged = self._assemble(len(segments), rows)
                merged.update(fields)
                await self._replace(session, key, merged)
                return

            owner = await self._ancestor(session, segments)
            if owner is not None:
                ancestor, document = owner
                current = self._drill(document, segments[len(split_path(ancestor)):])
                merged = dict(current) if isinstance(current, dict) else {}
                merged.update(fields)
                await self._write_into_ancestor(session, ancestor, document, segments, merged)
                return

            await session.execute(insert(documents).values(path=key, value=dict(fields)))

    @with_deadlock_retry()
    async def remove(self, path: str) -> None:
        segments = split_path(path)
        key = _join(segments)
        async with session_scope(self._session_maker) as session:
            await session.execute(delete(documents).where(_subtree_clause(key)))
            owner = await self._ancestor(session, segments)
            if owner is not None:
                await self._write_into_ancestor(session, *owner, segments, None)

    async def ping(self) -> None:
        async with session_scope(self._session_maker) as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
