"""Shared fixtures: an in-memory stand-in for the PostgreSQL pool."""

from pathlib import Path
import re
import sys

import psycopg2
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from db.connection import QueryResult
from db.datastore import DataStore


class FakePool:
    """
    Understands the handful of statements the data store issues and keeps
    just enough state (tables, guids, usernames) to answer them.
    """

    target = "postgres://fake:5432"

    def __init__(self, connect_failures=0, tables=(), guids=(), usernames=(), failing=()):
        self.connect_failures = connect_failures
        self.connect_attempts = 0
        self.tables = list(tables)
        self.guids = set(guids)
        self.usernames = list(usernames)
        self.failing = list(failing)
        self.queries = []
        self.events = []
        self.closed = False

    def connect(self):
        self.connect_attempts += 1
        self.events.append("connect")
        if self.connect_attempts <= self.connect_failures:
            raise psycopg2.OperationalError("could not connect to server")

    def close(self):
        self.closed = True

    def query(self, sql, params=None):
        self.queries.append((sql, params))
        for pattern in self.failing:
            if pattern in sql:
                raise psycopg2.ProgrammingError(f"statement failed: {pattern}")

        if "to_regclass" in sql:
            name = params[0]
            self.events.append(f"exists:{name}")
            found = name if name in self.tables else None
            return QueryResult(rows=[{"to_regclass": found}], rowcount=1)

        match = re.search(r"CREATE TABLE (\w+)", sql)
        if match:
            self.events.append(f"create:{match.group(1)}")
            self.tables.append(match.group(1))
            return QueryResult()

        match = re.search(r"DROP TABLE (\w+)", sql)
        if match:
            if match.group(1) not in self.tables:
                raise psycopg2.ProgrammingError(f'table "{match.group(1)}" does not exist')
            self.tables.remove(match.group(1))
            return QueryResult()

        if "FROM game WHERE guid" in sql:
            rows = [{"guid": params[0]}] if params[0] in self.guids else []
            return QueryResult(rows=rows, rowcount=len(rows))

        if "LOWER(username)" in sql:
            rows = [{"username": u} for u in self.usernames if u.lower() == params[0].lower()]
            return QueryResult(rows=rows, rowcount=len(rows))

        if "LIKE" in sql:
            prefix = params[0][:-1].replace("\\", "")
            rows = [{"username": u} for u in sorted(self.usernames) if u.startswith(prefix)]
            return QueryResult(rows=rows, rowcount=len(rows))

        if sql.lstrip().startswith("UPDATE stream"):
            return QueryResult(rowcount=1)

        return QueryResult()


@pytest.fixture
def fake_pool():
    return FakePool()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def store(fake_pool, sleeps):
    return DataStore(pool=fake_pool, sleep=sleeps.append)
