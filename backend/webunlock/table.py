import logging
from typing import Any, Dict, List, Optional, Tuple

from .errors import TableNotFoundError
from .extractor import normalize_text
from .models import ScrapeOptions, TableRow
from .session import BrowserSession, navigate

logger = logging.getLogger(__name__)

# Each row becomes a list of {header, section, text} cells, where section is
# the tag of the row's parent (thead, tbody, tfoot or table). Falls back to
# querying <tr> descendants when the root is not itself a <table>.
TABLE_SNAPSHOT_SCRIPT = """
table => {
    const rows = table.rows ? Array.from(table.rows) : Array.from(table.querySelectorAll('tr'));
    return rows.map(row => {
        const section = row.parentElement ? row.parentElement.tagName.toLowerCase() : 'table';
        return Array.from(row.cells || row.querySelectorAll('th, td')).map(cell => ({
            header: cell.tagName === 'TH',
            section: section,
            text: typeof cell.innerText === 'string' ? cell.innerText : cell.textContent
        }));
    });
}
"""

Cell = Dict[str, Any]


def _header_names(cells: List[Cell]) -> List[str]:
    names = []
    seen = set()
    for index, cell in enumerate(cells):
        name = normalize_text(cell.get("text")) or f"col_{index}"
        if name in seen:
            name = f"{name}_{index}"
        seen.add(name)
        names.append(name)
    return names


def infer_headers(grid: List[List[Cell]]) -> Tuple[List[str], List[List[Cell]]]:
    """Pick the header row and return (headers, data rows).

    The header row is the first <thead> row, else the first row made only of
    <th> cells, else the first row. Footer totals and row-header cells
    (<th scope="row">) never qualify on their own. The header row is not a
    data row.
    """
    grid = [row for row in grid if row]
    if not grid:
        return [], []

    header_index = next(
        (i for i, row in enumerate(grid) if row[0].get("section") == "thead"),
        None,
    )
    if header_index is None:
        header_index = next(
            (
                i for i, row in enumerate(grid)
                if row[0].get("section") != "tfoot" and all(cell.get("header") for cell in row)
            ),
            0,
        )

    headers = _header_names(grid[header_index])
    data_rows = grid[:header_index] + grid[header_index + 1:]
    return headers, data_rows


def rows_to_records(headers: List[str], data_rows: List[List[Cell]]) -> List[TableRow]:
    records = []
    for row in data_rows:
        record: TableRow = {}
        for index, header in enumerate(headers):
            cell = row[index] if index < len(row) else None
            record[header] = normalize_text(cell.get("text")) if cell else None
        records.append(record)
    return records


def reconstruct(grid: List[List[Cell]]) -> List[TableRow]:
    headers, data_rows = infer_headers(grid)
    return rows_to_records(headers, data_rows)


async def read_table(page, table_selector: str) -> Optional[List[List[Cell]]]:
    """Raw cell grid of the table, or None when the selector matches nothing."""
    table = await page.query_selector(table_selector)
    if table is None:
        return None
    return await table.evaluate(TABLE_SNAPSHOT_SCRIPT)


async def extract_table(session: BrowserSession, url: str, table_selector: str, options: ScrapeOptions) -> List[TableRow]:
    await navigate(session.page, url, options)

    grid = await read_table(session.page, table_selector)
    if grid is None:
        raise TableNotFoundError(table_selector)

    rows = reconstruct(grid)
    logger.info(f"Table {table_selector!r} produced {len(rows)} rows")
    return rows
