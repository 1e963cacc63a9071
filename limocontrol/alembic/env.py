from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

from limocontrol.config import settings
from limocontrol.db import normalize_url
from limocontrol.models import Base  # importing the package registers every table

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

def get_url():
    if not settings.DATABASE_URL:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    return normalize_url(settings.DATABASE_URL)

def run_migrations_offline():
    url = get_url()
    context.configure(url=url, target_metadata=Base.metadata, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_url()
    connectable = engine_from_config(configuration, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=Base.metadata)
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
