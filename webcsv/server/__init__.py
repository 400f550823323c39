"""Reference HTTP service storing people records validated by WebCSV."""

from webcsv.server.app import create_app
from webcsv.server.people import PEOPLE_SCHEMA, Person, PersonStore

__all__ = ["create_app", "PEOPLE_SCHEMA", "Person", "PersonStore"]
