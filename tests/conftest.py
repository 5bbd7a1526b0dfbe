"""
Shared pytest fixtures for petcli tests.

This module provides common fixtures used across all test files, including:
- An isolated petcli home (so log files never land in the real one)
- Record store fixtures backed by a temporary db.json
- Time freezing utilities
"""

import os
import random

import pytest
from freezegun import freeze_time

from petcli.model import RecordStore, init_db
from petcli.petcli_env import PetcliEnvironment, RecordsConfig


@pytest.fixture(autouse=True)
def petcli_home(tmp_path, monkeypatch):
    """
    Points $PETCLI_HOME at a fresh directory for every test.
    """
    home = tmp_path / "petcli-home"
    monkeypatch.setenv("PETCLI_HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture
def frozen_time():
    """
    Freezes time to 2025-01-01 12:00:00 UTC for the duration of the test.
    """
    with freeze_time("2025-01-01 12:00:00") as frozen:
        yield frozen


@pytest.fixture
def test_env(petcli_home):
    env = PetcliEnvironment()
    env.ensure(init_config=True, init_db_fn=init_db)
    return env


@pytest.fixture
def db_path(tmp_path):
    """
    An empty record file.
    """
    path = tmp_path / "db.json"
    init_db(path)
    return path


@pytest.fixture
def store(db_path):
    """
    A RecordStore over an empty file with a seeded random generator.
    """
    return RecordStore(db_path, RecordsConfig(), rng=random.Random(1234))


@pytest.fixture
def filled_store(store):
    """
    A RecordStore holding five random pets.
    """
    for _ in range(5):
        store.append_random()
    return store


@pytest.fixture
def pty_pair():
    """
    A pseudo-terminal: ``(master_fd, slave_file)``.

    Bytes written to ``master_fd`` arrive as typed input on ``slave_file``.
    """
    master, slave = os.openpty()
    stdin = os.fdopen(slave, "r")
    yield master, stdin
    stdin.close()
    os.close(master)


@pytest.fixture
def pty_stdin(pty_pair):
    return pty_pair[1]
