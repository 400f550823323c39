"""People records served by the reference service.

Defines the fixed reference schema, the typed ``Person`` record, the
mapping between CSV records and people, and a lock-guarded in-memory
store.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import List, Sequence

from webcsv.lib.schema import ColumnSpec, SchemaSpec
from webcsv.lib.validators import normalize_decimal, parse_bool_literal

__all__ = [
    "PEOPLE_SCHEMA",
    "Person",
    "PersonStore",
    "person_from_record",
    "person_to_record",
]

# Column order must match person_from_record / person_to_record
PEOPLE_SCHEMA = SchemaSpec(
    version="1.0",
    with_header=False,
    delimiter=",",
    columns=(
        ColumnSpec.string("LastName", 50),
        ColumnSpec.string("FirstName", 50),
        ColumnSpec.string("MiddleName", 50),
        ColumnSpec("Age", "int"),
        ColumnSpec.decimal("Height", 13, 3),
        ColumnSpec.decimal("Weight", 13, 3),
        ColumnSpec("Alive", "bool"),
        ColumnSpec("DateBorn", "date"),
        ColumnSpec("LastUpdated", "datetime"),
    ),
)

_HEIGHT = 4
_WEIGHT = 5


@dataclass(frozen=True)
class Person:
    last_name: str
    first_name: str
    middle_name: str
    age: int
    height: float
    weight: float
    alive: bool
    date_born: date
    last_updated: datetime

    def matches(self, last_name: str, first_name: str, middle_name: str) -> bool:
        return (
            self.last_name == last_name
            and self.first_name == first_name
            and self.middle_name == middle_name
        )


_TIMESTAMP_PATTERN = re.compile(
    r"(?P<base>[^.]+?)(?:\.(?P<fraction>[0-9]+))?(?P<tz>Z|[+-][0-9]{2}:[0-9]{2})"
)


def _parse_timestamp(value: str) -> datetime:
    # fromisoformat() before Python 3.11 takes neither "Z" nor arbitrary fraction lengths
    match = _TIMESTAMP_PATTERN.fullmatch(value)
    if match is None:
        return datetime.fromisoformat(value)
    fraction = (match["fraction"] or "")[:6].ljust(6, "0")
    tz = "+00:00" if match["tz"] == "Z" else match["tz"]
    return datetime.fromisoformat(f"{match['base']}.{fraction}{tz}")


def _decimal(record: Sequence[str], index: int) -> float:
    # Validation accepts forms like "" and "-." that float() rejects
    column = PEOPLE_SCHEMA.columns[index]
    normalized = normalize_decimal(record[index], column.precision, column.scale)
    whole, _, fraction = normalized.partition(".")
    if not whole.lstrip("+-"):
        whole += "0"
    return float(f"{whole}.{fraction}")


def person_from_record(record: Sequence[str]) -> Person:
    """Build a Person from a record validated against PEOPLE_SCHEMA."""
    return Person(
        last_name=record[0],
        first_name=record[1],
        middle_name=record[2],
        age=int(record[3]),
        height=_decimal(record, _HEIGHT),
        weight=_decimal(record, _WEIGHT),
        alive=parse_bool_literal(record[6]),
        date_born=date.fromisoformat(record[7]),
        last_updated=_parse_timestamp(record[8]),
    )


def person_to_record(person: Person) -> List[str]:
    """Render a Person as a record in PEOPLE_SCHEMA column order."""
    height_scale = PEOPLE_SCHEMA.columns[_HEIGHT].scale
    weight_scale = PEOPLE_SCHEMA.columns[_WEIGHT].scale
    return [
        person.last_name,
        person.first_name,
        person.middle_name,
        str(person.age),
        f"{person.height:.{height_scale}f}",
        f"{person.weight:.{weight_scale}f}",
        "true" if person.alive else "false",
        person.date_born.isoformat(),
        person.last_updated.isoformat().replace("+00:00", "Z"),
    ]


class PersonStore:
    """In-memory collection of people, safe to share between request threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._people: List[Person] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._people)

    def insert(self, people: Sequence[Person]) -> int:
        """Append people; returns how many were added."""
        with self._lock:
            self._people.extend(people)
        return len(people)

    def update(self, last_name: str, first_name: str, middle_name: str, person: Person) -> bool:
        """Replace the first matching person's attributes.

        The name of the stored person is kept. Returns False if nobody matched.
        """
        with self._lock:
            for i, current in enumerate(self._people):
                if current.matches(last_name, first_name, middle_name):
                    self._people[i] = replace(
                        person,
                        last_name=current.last_name,
                        first_name=current.first_name,
                        middle_name=current.middle_name,
                    )
                    return True
        return False

    def delete(self, last_name: str, first_name: str, middle_name: str) -> int:
        """Remove every matching person; returns how many were removed."""
        with self._lock:
            kept = [p for p in self._people if not p.matches(last_name, first_name, middle_name)]
            removed = len(self._people) - len(kept)
            self._people = kept
        return removed

    def snapshot(self) -> List[Person]:
        with self._lock:
            return list(self._people)
