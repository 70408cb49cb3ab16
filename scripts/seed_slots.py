"""Create the document table and seed empty parking slots 01..SLOT_COUNT."""

import asyncio
import sys
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from intellipark.config import get_settings  # noqa: E402
from intellipark.domain.entities.slot import initial_slots  # noqa: E402
from intellipark.infrastructure.db.document_store_sql import DocumentStoreSQL  # noqa: E402
from intellipark.infrastructure.db.engine import build_engine, build_sessionmaker  # noqa: E402
from intellipark.infrastructure.db.tables import metadata  # noqa: E402


async def seed(reset: bool = False):
    settings = get_settings()
    engine = build_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    print("Ensured documents table exists.")

    store = DocumentStoreSQL(build_sessionmaker(engine))
    seeded = 0
    for slot, fields in initial_slots(settings.slot_count).items():
        if not reset and await store.get(slot) is not None:
            continue
        await store.set(slot, fields)
        seeded += 1

    print(f"Seeded {seeded} of {settings.slot_count} slots.")
    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(seed(reset="--reset" in sys.argv))
