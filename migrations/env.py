# migrations/env.py
from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from signup.core.config import get_settings
from signup.db.base import Base, import_models
from signup.db.session import normalize_dsn

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# sessions + attendances must be registered on Base.metadata before autogenerate
import_models()
target_metadata = Base.metadata

# DATABASE_URL from env / .env overrides alembic.ini
_url = normalize_dsn(get_settings().DATABASE_URL)
if _url:
    config.set_main_option("sqlalchemy.url", _url)


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        **kwargs,
    )


def run_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    _configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith("sqlite"),
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_on(connection) -> None:
    # batch mode: SQLite cannot ALTER constraints in place
    _configure(connection=connection, render_as_batch=connection.dialect.name == "sqlite")
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    # a caller (tests, scripts) may hand over an open connection
    connection = config.attributes.get("connection")
    if connection is not None:
        _run_on(connection)
        return

    engine = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection:
        _run_on(connection)


if context.is_offline_mode():
    run_offline()
else:
    run_online()
