"""
Input reading for the discount engine.

Turns a transactions CSV into a stream of Records. Each line holds seven
comma-separated fields:

    timestamp,product_name,expiry_date,quantity,unit_price,channel,payment_method

Numeric fields are coerced by the Record model. What happens to a line that
cannot be coerced is an explicit choice made by the caller:

- ``abort``: raise MalformedRowError and stop the batch.
- ``skip``: log a warning and continue with the next line.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional

from pydantic import ValidationError

from discount_engine.config import MalformedRowPolicy
from discount_engine.domain.models import Record
from discount_engine.errors import IngestError, MalformedRowError
from discount_engine.utils.logging import get_logger

log = get_logger(__name__)

FIELDS = (
    "timestamp",
    "product_name",
    "expiry_date",
    "quantity",
    "unit_price",
    "channel",
    "payment_method",
)


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


def parse_line(line: str, line_number: int) -> Record:
    """
    Build a Record from one CSV line.

    Raises
    ------
    MalformedRowError
        If the line does not have exactly seven fields or a numeric field does
        not parse.
    """
    parts = line.rstrip("\r\n").split(",")
    if len(parts) != len(FIELDS):
        raise MalformedRowError(
            line_number, f"expected {len(FIELDS)} fields, got {len(parts)}"
        )
    try:
        return Record(**dict(zip(FIELDS, parts)))
    except ValidationError as exc:
        raise MalformedRowError(line_number, _describe(exc)) from exc


class RecordReader:
    """
    Iterate over the Records of a CSV file, tracking skipped lines.

    Example
    -------
        reader = RecordReader("data/TRX1000.csv", policy="skip")
        for record in reader:
            ...
        print(reader.skipped)
    """

    def __init__(
        self,
        path: Path | str,
        has_header: bool = True,
        policy: MalformedRowPolicy = "abort",
    ) -> None:
        self.path = Path(path)
        self.has_header = has_header
        self.policy = policy
        self.skipped = 0

    def __iter__(self) -> Iterator[Record]:
        try:
            handle = self.path.open("r", encoding="utf-8-sig", newline="")
        except OSError as exc:
            raise IngestError(f"cannot read input file {self.path}: {exc}") from exc

        with handle:
            for line_number, line in enumerate(handle, start=1):
                if line_number == 1 and self.has_header:
                    continue
                if not line.strip():
                    continue
                try:
                    yield parse_line(line, line_number)
                except MalformedRowError as exc:
                    if self.policy == "abort":
                        log.error(
                            f"Malformed row aborts the batch: {exc}",
                            extra={"line_number": exc.line_number, "path": str(self.path)},
                        )
                        raise
                    self.skipped += 1
                    log.warning(
                        f"Skipping malformed row: {exc}",
                        extra={"line_number": exc.line_number, "path": str(self.path)},
                    )


def read_records(
    path: Path | str,
    has_header: bool = True,
    policy: MalformedRowPolicy = "abort",
    limit: Optional[int] = None,
) -> Iterator[Record]:
    """Yield Records from `path`, stopping after `limit` records when given."""
    if limit is not None and limit <= 0:
        return
    for count, record in enumerate(RecordReader(path, has_header, policy), start=1):
        yield record
        if limit is not None and count >= limit:
            return


__all__ = ["FIELDS", "RecordReader", "parse_line", "read_records"]
