from fastapi import Header
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from agency_billing.domain.billing_document import DocumentKind

# Seconds a SQLite connection waits for the write lock
SQLITE_BUSY_TIMEOUT = 30


def _disable_driver_begin(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


def _begin_immediate(conn):
    conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(db_uri: str, **kwargs) -> AsyncEngine:
    """
    Async engine for the configured store

    On SQLite, FOR UPDATE is ignored, so every transaction takes the
    database write lock at BEGIN instead. Transactions that read a
    document and then write against it are serialized.
    """
    if db_uri.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"timeout": SQLITE_BUSY_TIMEOUT})

    engine = create_async_engine(db_uri, echo=False, future=True, **kwargs)

    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _disable_driver_begin)
        event.listen(engine.sync_engine, "begin", _begin_immediate)

    return engine


engine = build_engine(ApplicationConfig.DB_URI)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

DOCUMENT_NUMBER_PREFIXES = {
    DocumentKind.INVOICE: ApplicationConfig.INVOICE_NUMBER_PREFIX,
    DocumentKind.PROPOSAL: ApplicationConfig.PROPOSAL_NUMBER_PREFIX,
}


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_tenant_id(x_tenant_id: str = Header(..., min_length=1)) -> str:
    """Tenant resolved by the upstream gateway"""
    return x_tenant_id
