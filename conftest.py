from datetime import date

import pytest

import database
from seed import build_sample_library

AS_OF = date(2024, 3, 20)


@pytest.fixture
def as_of():
    return AS_OF


@pytest.fixture
def lib():
    # Sample library with loan dates relative to AS_OF
    return build_sample_library(AS_OF)


@pytest.fixture
def db_file(tmp_path, monkeypatch):
    # Each test gets its own SQLite file
    path = str(tmp_path / "lending_test.db")
    monkeypatch.setattr(database, "DATABASE_FILE", path)
    database.initialize_database()
    return path


@pytest.fixture
def seeded_db(db_file, lib):
    database.save_library(lib)
    return db_file
