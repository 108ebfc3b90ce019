import csv
import io
import json
import re
import time
from typing import Any, Dict, List, Optional

EXTRACTION_COLUMNS = ["selector", "index", "text", "attributes"]


class ExportError(ValueError):
    pass


def _csv_writer(buffer: io.StringIO):
    return csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def table_to_csv(rows: List[Dict[str, Any]]) -> str:
    columns: List[str] = []
    for row in rows:
        if not isinstance(row, dict):
            raise ExportError("Table rows must be objects")
        for key in row:
            if key not in columns:
                columns.append(key)

    buffer = io.StringIO()
    writer = _csv_writer(buffer)
    writer.writerow(columns)
    for row in rows:
        writer.writerow([_cell(row.get(column)) for column in columns])
    return buffer.getvalue()


def extraction_to_csv(data: Dict[str, Any]) -> str:
    buffer = io.StringIO()
    writer = _csv_writer(buffer)
    writer.writerow(EXTRACTION_COLUMNS)
    for selector, records in data.items():
        if not isinstance(records, list):
            raise ExportError(f"Value for selector {selector!r} must be a list")
        for index, record in enumerate(records):
            record = record if isinstance(record, dict) else {"text": record}
            writer.writerow([
                selector,
                index,
                _cell(record.get("text")),
                _cell(record.get("attributes")),
            ])
    return buffer.getvalue()


def to_csv(data: Any) -> str:
    """CSV for either a table result (list of rows) or a selector-keyed result."""
    if isinstance(data, list) and data:
        return table_to_csv(data)
    if isinstance(data, dict) and data:
        return extraction_to_csv(data)
    raise ExportError("Nothing to export: data must be a non-empty list or object")


def to_json(data: Any) -> str:
    if data is None:
        raise ExportError("Nothing to export: data is missing")
    return json.dumps(data, indent=2, ensure_ascii=False)


def export_filename(filename: Optional[str], extension: str) -> str:
    name = re.sub(r"[^A-Za-z0-9._-]", "_", filename or "").strip("._")
    if not name:
        name = f"webunlock-{int(time.time() * 1000)}"
    if not name.endswith(f".{extension}"):
        name = f"{name}.{extension}"
    return name
