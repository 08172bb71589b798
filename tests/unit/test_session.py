"""Unit tests for engine construction"""

from finance_tracker.infrastructure.database.session import build_engine


def test_sqlite_engine_allows_cross_thread_use():
    engine = build_engine("sqlite://")

    assert engine.dialect.name == "sqlite"
    with engine.connect() as conn:
        assert conn.exec_driver_sql("select 1").scalar() == 1
    engine.dispose()


def test_postgres_engine_uses_configured_pool():
    engine = build_engine("postgresql+psycopg2://user:pw@localhost:5432/finance")

    assert engine.dialect.name == "postgresql"
    assert engine.pool.size() == 5
