"""
Flat-file persistence for the product index.

One record per line, comma separated, no quoting or escaping:

    id,name,weight,color,location,unitsSold,price,ps0,ps1,ps2,ps3,ps4,psCount

`ps0..ps4` hold the sales window oldest first, unused slots are -1, and
`psCount` is the number of valid slots. Records are written in ascending id
order. Loading is tolerant: a missing file is an empty index and malformed
lines are logged and skipped.
"""

from __future__ import annotations

import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from sales_insight.domain.errors import DuplicateKeyError, RecordFormatError
from sales_insight.domain.models import ProductRecord, SalesWindow
from sales_insight.index.avl import ProductIndex
from sales_insight.utils.logging import get_logger

log = get_logger(__name__)

FIELD_COUNT = 13
EMPTY_SLOT = -1
_TEXT_FIELDS = ("name", "color", "location")


@dataclass(frozen=True)
class LoadReport:
    """Counts from one `load_index` call."""

    loaded: int = 0
    skipped: int = 0
    duplicates: int = 0


def format_line(record: ProductRecord) -> str:
    """Serialize one record, without the trailing newline."""
    for field_name in _TEXT_FIELDS:
        value = getattr(record, field_name)
        if "," in value or "\n" in value:
            log.warning(
                "Field contains a separator and will not load back",
                extra={"product_id": record.id, "field": field_name},
            )

    window = list(record.past_sales.values)
    slots = window + [EMPTY_SLOT] * (SalesWindow.CAPACITY - len(window))
    parts = [
        str(record.id),
        record.name,
        f"{record.weight:.2f}",
        record.color,
        record.location,
        str(record.units_sold),
        f"{record.price:.2f}",
        *(str(slot) for slot in slots),
        str(len(window)),
    ]
    return ",".join(parts)


def parse_line(line: str) -> ProductRecord:
    """
    Parse one persisted line into a record with its window restored raw.

    Raises
    ------
    RecordFormatError
        On a wrong field count, a non-numeric number, or a slot count outside
        0..5.
    """
    parts = line.rstrip("\r\n").split(",")
    if len(parts) != FIELD_COUNT:
        raise RecordFormatError(f"expected {FIELD_COUNT} fields, got {len(parts)}")

    try:
        product_id = int(parts[0])
        weight = float(parts[2])
        units_sold = int(parts[5])
        price = float(parts[6])
        slots = [int(value) for value in parts[7:12]]
        count = int(parts[12])
    except ValueError as exc:
        raise RecordFormatError(str(exc)) from exc

    if not 0 <= count <= SalesWindow.CAPACITY:
        raise RecordFormatError(f"sales count {count} outside 0..{SalesWindow.CAPACITY}")

    return ProductRecord(
        id=product_id,
        name=parts[1],
        weight=weight,
        color=parts[3],
        location=parts[4],
        units_sold=units_sold,
        price=price,
        past_sales=SalesWindow(values=slots[:count]),
    )


def _decode(line: Union[bytes, str]) -> str:
    if isinstance(line, str):
        return line
    try:
        return line.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RecordFormatError(f"not valid UTF-8 at byte {exc.start}") from exc


def read_records(
    lines: Iterable[Union[bytes, str]], source: str = "<lines>"
) -> Tuple[List[ProductRecord], int]:
    """
    Parse `lines`, returning the good records and the number skipped.

    Lines may be `bytes` (as read from the data file) or `str`; an undecodable
    line counts as malformed.
    """
    records: List[ProductRecord] = []
    skipped = 0
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            records.append(parse_line(_decode(line)))
        except RecordFormatError as exc:
            skipped += 1
            log.warning(
                "Skipping malformed line",
                extra={"source": source, "line_number": lineno, "reason": str(exc)},
            )
    return records, skipped


def load_index(path: Path | str) -> Tuple[ProductIndex, LoadReport]:
    """
    Build an index from the data file at `path`.

    A missing file yields an empty index. When the same id appears twice the
    first line wins.
    """
    path = Path(path)
    index = ProductIndex()
    if not path.exists():
        log.info("Data file not found, starting empty", extra={"path": str(path)})
        return index, LoadReport(0, 0, 0)

    with path.open("rb") as f:
        records, skipped = read_records(f, source=str(path))

    duplicates = 0
    for record in records:
        try:
            index.insert(record)
        except DuplicateKeyError:
            duplicates += 1
            log.warning(
                "Duplicate id in data file, keeping first",
                extra={"path": str(path), "product_id": record.id},
            )

    report = LoadReport(len(index), skipped, duplicates)
    log.info(
        "Loaded data file",
        extra={
            "path": str(path),
            "records": report.loaded,
            "skipped": report.skipped,
            "duplicates": report.duplicates,
        },
    )
    return index, report


def _target_mode(path: Path) -> int:
    """Mode for the saved file: keep an existing file's, else the umask default."""
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def save_index(index: ProductIndex, path: Path | str) -> int:
    """
    Write every record of `index` to `path` in ascending id order.

    The file is written to a temporary sibling and then moved over `path`, so
    an interrupted save leaves the previous file intact. Returns the number
    of records written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    written = 0
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            for record in index.traverse("in"):
                f.write(format_line(record) + "\n")
                written += 1
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    log.info("Saved data file", extra={"path": str(path), "records": written})
    return written


__all__ = [
    "EMPTY_SLOT",
    "FIELD_COUNT",
    "LoadReport",
    "format_line",
    "load_index",
    "parse_line",
    "read_records",
    "save_index",
]
