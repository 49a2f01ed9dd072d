import pytest

from src.attendance_engine.attendance_engine.database.connection import DatabaseConnection, DBConfig
from src.attendance_engine.attendance_engine.database.mysql_base import changed, db_cursor


class FakeCursor:
    def __init__(self):
        self.closed = False
        self.rowcount = 0

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.cursor_obj = FakeCursor()
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self.cursor_obj

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self):
        self.conn = FakeConnection()

    def connect(self):
        return self.conn


def test_db_cursor_commits_on_success():
    factory = FakeFactory()

    with db_cursor(factory) as (_, cur):
        cur.rowcount = 1

    assert factory.conn.committed is True
    assert factory.conn.rolled_back is False
    assert factory.conn.cursor_obj.closed is True
    assert factory.conn.closed is True


def test_db_cursor_rolls_back_and_reraises():
    factory = FakeFactory()

    with pytest.raises(RuntimeError):
        with db_cursor(factory):
            raise RuntimeError("duplicate key")

    assert factory.conn.committed is False
    assert factory.conn.rolled_back is True
    assert factory.conn.closed is True


def test_changed_counts_matched_rows():
    cur = FakeCursor()
    assert changed(cur) is False

    cur.rowcount = 1
    assert changed(cur) is True


def test_db_config_from_mapping_fills_defaults():
    config = DBConfig.from_mapping({"host": "db", "port": "3307", "user": "att"})

    assert config == DBConfig(host="db", port=3307, user="att", password="", database="attendance_engine")
    kwargs = config.connect_kwargs(with_database=False)
    assert "database" not in kwargs
    assert kwargs["time_zone"] == "+00:00"


def test_connection_factory_is_reused_per_config():
    first = DatabaseConnection.get_instance(DBConfig.from_mapping({"database": "a"}))

    assert DatabaseConnection.get_instance(DBConfig.from_mapping({"database": "a"})) is first
    other = DatabaseConnection.get_instance(DBConfig.from_mapping({"database": "b"}))
    assert other is not first
    assert other.config.database == "b"
