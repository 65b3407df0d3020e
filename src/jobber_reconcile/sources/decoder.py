"""CSV decoding for Jobber exports."""

import asyncio
import csv
from io import StringIO
from pathlib import Path
from typing import IO, Union

CsvSource = Union[str, Path, IO[str], IO[bytes]]


def _read_text(source: CsvSource) -> str:
    """Resolve a path, raw CSV text, or file object to text."""
    if isinstance(source, Path):
        return source.read_text(encoding="utf-8-sig")
    if isinstance(source, str):
        # A non-empty single line is a path; raw CSV text always has a line break
        if source.strip() and "\n" not in source:
            return Path(source).read_text(encoding="utf-8-sig")
        return source
    content = source.read()
    if isinstance(content, bytes):
        return content.decode("utf-8-sig")
    return content


def read_records(source: CsvSource) -> list[dict[str, str]]:
    """
    Parse CSV with a header row into string-keyed records, in file order.
    Handles quoted fields containing commas/newlines; empty lines are skipped.
    """
    text = _read_text(source).lstrip("\ufeff")
    reader = csv.DictReader(StringIO(text, newline=""), restval="")
    if reader.fieldnames:
        reader.fieldnames = [name.strip() for name in reader.fieldnames]
    # Overflow cells land under the None key
    return [{k: v for k, v in row.items() if k is not None} for row in reader]


async def load_records(source: CsvSource) -> list[dict[str, str]]:
    """read_records off the event loop thread."""
    return await asyncio.to_thread(read_records, source)
