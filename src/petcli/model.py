from __future__ import annotations

import random
import string
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, TypeAdapter

from .petcli_env import RecordsConfig
from .shared import log_msg

NAME_LENGTH = 10
CATEGORIES = ("cats", "dogs")
NAME_ALPHABET = string.ascii_letters + string.digits


class StorageError(Exception):
    """The record file is missing, unreadable or does not hold a record list."""


class Record(BaseModel):
    id: int = Field(ge=0)
    name: str
    category: str
    age: int = Field(ge=0)
    created_at: datetime


RecordList = TypeAdapter(List[Record])


def random_record(
    rng: random.Random, config: Optional[RecordsConfig] = None
) -> Record:
    """
    Build a pet with random id, name, category and age, created now (UTC).

    Ages are drawn from ``[min_age, max_age)``, ids from ``[0, id_max)``.
    """
    config = config or RecordsConfig()
    return Record(
        id=rng.randrange(0, config.id_max),
        name="".join(rng.choice(NAME_ALPHABET) for _ in range(NAME_LENGTH)),
        category=rng.choice(CATEGORIES),
        age=rng.randrange(config.min_age, config.max_age),
        created_at=datetime.now(timezone.utc),
    )


def init_db(path: Path):
    """Create an empty record file. Used when setting up a new home."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(RecordList.dump_json([]))


class RecordStore:
    """
    Whole-file JSON persistence for the pet list.

    Every read goes to disk and every mutation rewrites the complete file, so
    edits made to the file between operations are always picked up. There is
    no locking; one process at a time.
    """

    def __init__(
        self,
        db_path: str | Path,
        config: Optional[RecordsConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.db_path = Path(db_path)
        self.config = config or RecordsConfig()
        self.rng = rng or random.Random()

    def load_all(self) -> List[Record]:
        try:
            raw = self.db_path.read_bytes()
        except OSError as e:
            raise StorageError(f"cannot read {self.db_path}: {e}") from e
        try:
            return RecordList.validate_json(raw)
        except ValueError as e:
            raise StorageError(f"malformed record file {self.db_path}: {e}") from e

    def save_all(self, records: List[Record]):
        try:
            self.db_path.write_bytes(RecordList.dump_json(records, indent=2))
        except OSError as e:
            raise StorageError(f"cannot write {self.db_path}: {e}") from e

    def append_random(self) -> List[Record]:
        records = self.load_all()
        record = random_record(self.rng, self.config)
        records.append(record)
        self.save_all(records)
        log_msg(f"added {record.id = }, {record.name = }, {len(records) = }")
        return records

    def remove_at(self, index: int):
        records = self.load_all()
        # negative positions are out of bounds here, not python-style offsets
        if not 0 <= index < len(records):
            raise IndexError(
                f"cannot remove record {index}: {len(records)} record(s) stored"
            )
        removed = records.pop(index)
        self.save_all(records)
        log_msg(f"removed {index = }, {removed.id = }, {len(records) = }")
