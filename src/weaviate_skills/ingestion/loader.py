"""Load records to ingest from JSON, JSONL and CSV files."""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..vectorstore.models import Record

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".json", ".jsonl", ".csv")


def load_records(
    path: Union[str, Path],
    vector_field: Optional[str] = None,
    id_field: Optional[str] = None,
) -> List[Record]:
    """
    Load records from a data file.

    JSON files must contain a list of objects, JSONL files one object per
    line. In CSV files a vector column holds a JSON array.

    Args:
        path: Path to a .json, .jsonl or .csv file
        vector_field: Column holding a precomputed embedding
        id_field: Column holding the object UUID

    Returns:
        List of Record objects

    Raises:
        ValueError: If the file type is unsupported or the content malformed
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        rows = _read_json(path)
    elif suffix == ".jsonl":
        rows = _read_jsonl(path)
    elif suffix == ".csv":
        rows = _read_csv(path)
    else:
        raise ValueError(
            f"Unsupported file type: {suffix}. Supported types: {', '.join(SUPPORTED_SUFFIXES)}"
        )

    records = [_row_to_record(row, vector_field, id_field) for row in rows]
    logger.info(f"Loaded {len(records)} records from {path}")
    return records


def _read_json(path: Path) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of objects")
    return data


def _read_jsonl(path: Path) -> List[Dict[str, Any]]:
    rows = []
    with open(path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                rows.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise ValueError(f"{path}:{line_number}: invalid JSON: {e}")
    return rows


def _read_csv(path: Path) -> Iterable[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return list(csv.DictReader(f))


def _row_to_record(
    row: Dict[str, Any], vector_field: Optional[str], id_field: Optional[str]
) -> Record:
    if not isinstance(row, dict):
        raise ValueError(f"Expected an object per record, got {type(row).__name__}")

    properties = dict(row)
    vector = properties.pop(vector_field, None) if vector_field else None
    uuid = properties.pop(id_field, None) if id_field else None

    # CSV cells arrive as strings
    if isinstance(vector, str):
        vector = json.loads(vector) if vector else None

    return Record(properties=properties, vector=vector, uuid=uuid or None)
