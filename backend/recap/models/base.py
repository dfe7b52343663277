from __future__ import annotations

from sqlmodel import SQLModel, create_engine
from sqlalchemy.engine import Engine
from recap.config import get_settings

# Tables register on SQLModel.metadata when their modules are imported
from recap.models import action_item, meeting, share_link, summary, transcript_segment  # noqa: F401

_settings = get_settings()

# SQLite with WAL enabled
engine: Engine = create_engine(
    f"sqlite:///{_settings.database_path}", connect_args={"check_same_thread": False}
)


def init_db(bind: Engine | None = None) -> None:
    target = bind or engine
    if target.dialect.name == "sqlite":
        with target.begin() as conn:
            conn.exec_driver_sql("PRAGMA journal_mode=WAL;")
            conn.exec_driver_sql("PRAGMA synchronous=NORMAL;")
    SQLModel.metadata.create_all(target)
