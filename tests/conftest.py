"""Pytest configuration and fixtures."""

import logging
import os
import sys
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from webcsv.lib.parser import parse_schema  # noqa: E402
from webcsv.server.people import PEOPLE_SCHEMA  # noqa: E402

SAMPLE_SCHEMA_TEXT = "ver:1.0,hdr:false,del:,; LastName:string(50),Age:int,Height:decimal(13,3)"

PEOPLE_SCHEMA_TEXT = (
    "ver:1.0,hdr:false,del:,; LastName:string(50),FirstName:string(50),"
    "MiddleName:string(50),Age:int,Height:decimal(13,3),Weight:decimal(13,3),"
    "Alive:bool,DateBorn:date,LastUpdated:datetime"
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep WEBCSV_* variables and any local .env file out of tests."""
    for key in list(os.environ):
        if key.startswith("WEBCSV_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sample_schema():
    """Three-column schema: string(50), int, decimal(13,3)."""
    return parse_schema(SAMPLE_SCHEMA_TEXT)


@pytest.fixture
def people_schema():
    return PEOPLE_SCHEMA


@pytest.fixture
def people_schema_text():
    """Description of the reference people schema as a client would send it."""
    return PEOPLE_SCHEMA_TEXT


@pytest.fixture
def person_row():
    """A valid people record."""
    return [
        "Lovelace",
        "Ada",
        "King",
        "36",
        "1.651",
        "54.300",
        "true",
        "1815-12-10",
        "2024-05-01T10:00:00Z",
    ]


@pytest.fixture
def restore_root_logger():
    """Undo handler and level changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            handler.close()
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
