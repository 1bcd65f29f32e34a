"""
CSV Utilities

Reading supplier/admin CSV exports with proper configuration.
Handles large field sizes, Excel BOMs and semicolon-delimited files.
"""

import csv
from pathlib import Path
from typing import Dict, Iterator


def configure_csv(field_size_limit: int = 10 * 1024 * 1024) -> None:
    """
    Configure CSV module for large fields.

    Args:
        field_size_limit: Maximum field size in bytes (default: 10MB)
    """
    csv.field_size_limit(field_size_limit)


def sniff_delimiter(sample: str) -> str:
    """
    Pick ';' or ',' as the delimiter of a CSV sample.

    Russian-locale Excel exports use ';' because ',' is the decimal separator.
    """
    header = sample.splitlines()[0] if sample else ""
    return ';' if header.count(';') > header.count(',') else ','


def read_csv(file_path: str | Path, encoding: str = 'utf-8-sig') -> Iterator[Dict[str, str]]:
    """
    Read CSV file and yield rows as dictionaries.

    Args:
        file_path: Path to CSV file
        encoding: File encoding (default: utf-8 with optional BOM)

    Yields:
        Dictionary for each row with column names as keys
    """
    configure_csv()

    with open(file_path, 'r', encoding=encoding, newline='') as f:
        delimiter = sniff_delimiter(f.read(4096))
        f.seek(0)
        reader = csv.DictReader(f, delimiter=delimiter)
        for row in reader:
            yield row


# Initialize CSV configuration on module import
configure_csv()
