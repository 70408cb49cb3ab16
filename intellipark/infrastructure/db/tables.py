from sqlalchemy import JSON, Column, DateTime, MetaData, String, Table, func

metadata = MetaData()

documents = Table(
    "documents",
    metadata,
    Column("path", String(512), primary_key=True),
    Column("value", JSON, nullable=True),
    Column("updated_at", DateTime, nullable=False, server_default=func.now(), onupdate=func.now()),
)
