# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import datetime
import logging
import typing

from dateutil.tz import tzlocal
from sqlalchemy import Column, MetaData, Table, delete, select
from sqlalchemy.dialects.sqlite import DATETIME, insert
from sqlalchemy.engine import Engine, create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import String, TypeDecorator, UnicodeText

from .commontypes import StorageError
from .util import now

logger = logging.getLogger(__name__)


class AwareDateTime(TypeDecorator):
    """
    A DateTime type which can only store tz-aware DateTimes
    """

    impl = DATETIME
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if isinstance(value, datetime.datetime):
            if value.tzinfo is None:
                raise ValueError("{!r} must be TZ-aware".format(value))
            value = value.astimezone(datetime.timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if isinstance(value, datetime.datetime):
            value = value.replace(tzinfo=datetime.timezone.utc).astimezone(tzlocal())
        return value

    def __repr__(self):
        return "AwareDateTime()"


metadata = MetaData()

storage_table = Table(
    "session_storage",
    metadata,
    Column("key", String, primary_key=True),
    Column("value", UnicodeText, nullable=False),
    Column("updated_at", AwareDateTime, nullable=False),
)


class SessionStorage:
    """String-valued key/value slots that live as long as the storage engine does.

    The default engine is an in-memory SQLite database, so everything stored here is
    gone once the process (the session) ends.
    """

    def __init__(self, engine: Engine):
        self.engine: typing.Optional[Engine] = engine

    def _engine(self) -> Engine:
        if self.engine is None:
            raise StorageError("Session storage has been closed")
        return self.engine

    def get_item(self, key: str) -> typing.Optional[str]:
        with self._engine().connect() as conn:
            return conn.execute(select(storage_table.c.value).where(storage_table.c.key == key)).scalar_one_or_none()

    def set_item(self, key: str, value: str):
        ins = insert(storage_table).values(key=key, value=value, updated_at=now())
        upsert = ins.on_conflict_do_update(
            index_elements=[storage_table.c.key],
            set_={"value": ins.excluded.value, "updated_at": ins.excluded.updated_at},
        )
        with self._engine().begin() as conn:
            conn.execute(upsert)
        logger.debug("Stored %d characters in slot %r", len(value), key)

    def remove_item(self, key: str):
        with self._engine().begin() as conn:
            conn.execute(delete(storage_table).where(storage_table.c.key == key))

    def updated_at(self, key: str) -> typing.Optional[datetime.datetime]:
        with self._engine().connect() as conn:
            return conn.execute(select(storage_table.c.updated_at).where(storage_table.c.key == key)).scalar_one_or_none()

    def clear(self):
        with self._engine().begin() as conn:
            conn.execute(delete(storage_table))

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None


def make_storage(url: str) -> SessionStorage:
    if url in ("sqlite://", "sqlite:///:memory:"):
        # an in-memory database exists per connection, so every checkout has to share one
        engine = create_engine(url, poolclass=StaticPool, connect_args={"check_same_thread": False})
    else:
        engine = create_engine(url)
    metadata.create_all(engine)
    return SessionStorage(engine)
