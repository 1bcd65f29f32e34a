"""
Source Readers

Thin adapters from uploaded files to decoded rows (ordered key/value
mappings). Parsing of cell values is left to the row normalizer.
"""

import json
import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..common.csv_utils import read_csv
from ..common.errors import EmptyImportError
from ..models import SourceFormat

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    '.csv': SourceFormat.CSV,
    '.xlsx': SourceFormat.XLSX,
    '.json': SourceFormat.JSON,
}


def detect_format(file_path: str | Path) -> SourceFormat:
    """Source format from the file extension. Raises ValueError if unsupported."""
    suffix = Path(file_path).suffix.lower()
    if suffix not in _EXTENSIONS:
        raise ValueError(f"Unsupported file type: {suffix or '(none)'} (expected .csv, .xlsx or .json)")
    return _EXTENSIONS[suffix]


def read_csv_rows(file_path: str | Path) -> List[Dict[str, str]]:
    """Non-blank CSV rows; Windows-1251 exports are retried after a UTF-8 failure."""
    for encoding in ('utf-8-sig', 'cp1251'):
        try:
            rows = list(read_csv(file_path, encoding=encoding))
            break
        except UnicodeDecodeError:
            logger.debug("%s is not %s encoded", file_path, encoding)
    else:
        raise EmptyImportError(f"Cannot decode {file_path} as UTF-8 or Windows-1251")

    return [
        row for row in rows
        if any(v.strip() for v in row.values() if isinstance(v, str))
    ]


def read_json_rows(file_path: str | Path) -> List[Dict[str, Any]]:
    """Rows from a JSON array, or from the "products" array of a JSON object."""
    with open(file_path, 'r', encoding='utf-8-sig') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise EmptyImportError(f"Invalid JSON in {file_path}: {e}") from e

    if isinstance(data, dict):
        data = data.get('products')
    if not isinstance(data, list):
        raise EmptyImportError(f"{file_path}: expected a JSON array of products")
    return data


def read_xlsx_rows(file_path: str | Path) -> List[Dict[str, Any]]:
    """Rows from the first worksheet; the first row holds the headers."""
    try:
        workbook = load_workbook(file_path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError) as e:
        raise EmptyImportError(f"Cannot open workbook {file_path}: {e}") from e

    try:
        sheet = workbook.worksheets[0]
        row_iter = sheet.iter_rows(values_only=True)
        header_row = next(row_iter, None)
        if not header_row:
            return []

        headers = [str(h).strip() if h is not None else None for h in header_row]
        rows = []
        for values in row_iter:
            if values is None or all(v is None or str(v).strip() == '' for v in values):
                continue
            rows.append({
                header: value
                for header, value in zip(headers, values)
                if header
            })
        return rows
    finally:
        workbook.close()


def read_rows(
    file_path: str | Path,
    source_format: Optional[SourceFormat] = None,
) -> Tuple[List[Dict[str, Any]], SourceFormat]:
    """
    Decode a file into rows.

    Args:
        file_path: Uploaded file
        source_format: Force a format instead of using the extension

    Returns:
        (rows, source_format)

    Raises:
        ValueError: unsupported extension
        EmptyImportError: missing file, undecodable file or zero rows
    """
    path = Path(file_path)
    if not path.exists():
        raise EmptyImportError(f"File not found: {path}")

    source_format = source_format or detect_format(path)
    if source_format is SourceFormat.CSV:
        rows = read_csv_rows(path)
    elif source_format is SourceFormat.XLSX:
        rows = read_xlsx_rows(path)
    elif source_format is SourceFormat.JSON:
        rows = read_json_rows(path)
    else:
        raise ValueError(f"{source_format.value} rows are not read from files")

    if not rows:
        raise EmptyImportError(f"No product rows in {path.name}")

    logger.info("Read %d rows from %s (%s)", len(rows), path.name, source_format.value)
    return rows, source_format
