"""File readers producing decoded rows for the batch importer."""

from .readers import detect_format, read_csv_rows, read_json_rows, read_rows, read_xlsx_rows

__all__ = ['detect_format', 'read_csv_rows', 'read_json_rows', 'read_rows', 'read_xlsx_rows']
