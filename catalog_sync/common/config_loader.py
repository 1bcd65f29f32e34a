"""
Configuration Loader

Loads YAML configuration for the import engine: column synonym tables,
the sentinel category name and engine limits.
"""

from pathlib import Path
from typing import Any, Dict, List

import yaml

from .constants import (
    CATEGORY_CACHE_TTL_SECONDS,
    DEFAULT_COLUMN_SYNONYMS,
    MAX_BATCH_ERRORS,
    SENTINEL_CATEGORY_NAME,
    SLUG_MAX_ATTEMPTS,
)


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'import_settings.yaml')

    Returns:
        Parsed YAML content as dictionary (empty dict for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_import_settings() -> Dict[str, Any]:
    """
    Load import engine settings with built-in defaults for missing keys.

    Returns:
        Dictionary with keys: column_synonyms, sentinel_category, max_errors,
        slug_max_attempts, category_cache_ttl_seconds
    """
    config = load_config('import_settings.yaml')
    return {
        'column_synonyms': _merge_synonyms(config.get('column_synonyms') or {}),
        'sentinel_category': config.get('sentinel_category') or SENTINEL_CATEGORY_NAME,
        'max_errors': int(config.get('max_errors', MAX_BATCH_ERRORS)),
        'slug_max_attempts': int(config.get('slug_max_attempts', SLUG_MAX_ATTEMPTS)),
        'category_cache_ttl_seconds': float(
            config.get('category_cache_ttl_seconds', CATEGORY_CACHE_TTL_SECONDS)
        ),
    }


def load_column_synonyms() -> Dict[str, List[str]]:
    """
    Load header synonyms per product field.

    Returns:
        Ordered mapping of field name to lower-case header substrings

    Example:
        {
            'sku': ['артикул', 'sku', 'код'],
            'price': ['цена', 'price', 'руб'],
            ...
        }
    """
    return load_import_settings()['column_synonyms']


def _merge_synonyms(overrides: Dict[str, List[str]]) -> Dict[str, List[str]]:
    """Overlay configured synonyms on the defaults, keeping default field order."""
    merged = {}
    for field_name, defaults in DEFAULT_COLUMN_SYNONYMS.items():
        values = overrides.get(field_name) or defaults
        merged[field_name] = [str(v).lower() for v in values]
    return merged
