# Common utilities
from .config_loader import (
    load_column_synonyms,
    load_config,
    load_import_settings,
)
from .csv_utils import configure_csv, read_csv
from .errors import (
    CatalogSyncError,
    CategoryCreationConflict,
    EmptyImportError,
    PersistenceError,
)
from .log_config import setup_logging
from .text_utils import clean_text, parse_flag, parse_int, parse_price
