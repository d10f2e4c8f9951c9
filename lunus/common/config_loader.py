"""
Configuration Loader

Loads YAML configuration files for sites and settings, and applies
per-site overrides from environment variables (.env.local / .env).
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from ..models import CategoryConfig, SiteConfig

logger = logging.getLogger(__name__)


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


def load_env(directory: Optional[Path] = None) -> Optional[Path]:
    """
    Load environment variables from .env.local, falling back to .env.

    Existing environment variables are not overwritten.

    Returns:
        Path of the file that was loaded, or None
    """
    directory = directory or Path.cwd()
    for name in ('.env.local', '.env'):
        env_file = directory / name
        if env_file.exists():
            load_dotenv(env_file, override=False)
            return env_file
    return None


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'sites.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_settings() -> Dict[str, Any]:
    """
    Load general settings.

    Returns:
        Dictionary with http, paths, cleaning and vector sections
    """
    return load_config('settings.yaml')


def _env_categories(source: str) -> Optional[List[CategoryConfig]]:
    """Parse <SOURCE>_CATEGORIES, a JSON array of {"key", "url"} objects."""
    raw = os.environ.get(f"{source.upper()}_CATEGORIES")
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse %s_CATEGORIES JSON: %s", source.upper(), e)
        return None
    if not isinstance(parsed, list):
        logger.error("%s_CATEGORIES must be a JSON array", source.upper())
        return None
    categories = [
        CategoryConfig(key=str(c['key']), url=str(c['url']))
        for c in parsed
        if isinstance(c, dict) and c.get('key') and c.get('url')
    ]
    return categories or None


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return None


def build_site_config(source: str, raw: Dict[str, Any]) -> SiteConfig:
    """
    Build a SiteConfig from its sites.yaml entry plus environment overrides.

    Overrides:
        <SOURCE>_CATEGORIES          replaces the category list
        <SOURCE>_MAX_PAGES           replaces pagination.max_pages
        <SOURCE>_PER_CATEGORY_LIMIT  replaces pagination.per_category_limit
    """
    categories = [
        CategoryConfig(key=str(c['key']), url=str(c['url']))
        for c in raw.get('categories', [])
    ]
    categories = _env_categories(source) or categories

    pagination = dict(raw.get('pagination') or {})
    max_pages = _env_int(f"{source.upper()}_MAX_PAGES")
    if max_pages is not None:
        pagination['max_pages'] = max_pages
    limit = _env_int(f"{source.upper()}_PER_CATEGORY_LIMIT")
    if limit is not None:
        pagination['per_category_limit'] = limit

    return SiteConfig(
        source=source,
        brand=raw.get('brand', source),
        folder=raw.get('folder', raw.get('brand', source)),
        base_url=raw.get('base_url', ''),
        categories=categories,
        category_mapping=dict(raw.get('category_mapping') or {}),
        parser=raw.get('parser', 'selector'),
        pagination=pagination,
        listing=dict(raw.get('listing') or {}),
        detail=dict(raw.get('detail') or {}),
    )


def load_sites() -> Dict[str, SiteConfig]:
    """
    Load all site configurations.

    Returns:
        Dictionary mapping source key to SiteConfig, in file order
    """
    config = load_config('sites.yaml')
    return {
        source: build_site_config(source, raw)
        for source, raw in (config.get('sites') or {}).items()
    }


def get_supported_sites() -> List[str]:
    """Return the configured site keys."""
    return list(load_sites().keys())


def load_site(source: str) -> SiteConfig:
    """
    Load one site configuration.

    Args:
        source: Site key (e.g. "hanssem"); case-insensitive

    Raises:
        ValueError: If the site is not configured
    """
    sites = load_sites()
    key = source.lower().strip()
    if key not in sites:
        raise ValueError(f"Unsupported site: {source}. Supported: {', '.join(sites.keys())}")
    return sites[key]


def get_brand_lookup(sites: Optional[Dict[str, SiteConfig]] = None) -> Dict[str, str]:
    """
    Map brand display names to source keys.

    Example:
        {'알로소': 'alloso', '일룸': 'iloom', ...}
    """
    if sites is None:
        sites = load_sites()
    return {site.brand: source for source, site in sites.items()}
