"""
Configuration loader for the short-news pipeline.
"""
from pathlib import Path
from typing import Dict, List, Any

import yaml
from loguru import logger

from crawler.interfaces import ConfigError
from crawler.models import LanguageConfig


def load_language_config(config_path: str) -> LanguageConfig:
    """Loads the per-language sources configuration.

    The file maps category names to listing URLs::

        language: Tamil
        categories:
          politics:
            - https://www.dinamalar.com/news/politics

    JSON files with the same shape load as well, since YAML is a superset of JSON.

    Raises:
        ConfigError: When the file is missing, unparseable or invalid.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing configuration file {config_path}: {e}", cause=e)

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid or empty configuration format in {config_path}")

    config = LanguageConfig(
        language=str(data.get('language', '')),
        categories=_read_categories(data.get('categories'), config_path),
    )

    errors = config.validate()
    if errors:
        raise ConfigError(f"Invalid configuration in {config_path}: {'; '.join(errors)}")

    logger.info(f"Loaded {len(config.categories)} categories for {config.language} from {config_path}")
    return config


def _read_categories(raw: Any, config_path: str) -> Dict[str, List[str]]:
    if not isinstance(raw, dict):
        raise ConfigError(f"'categories' must be a mapping in {config_path}")

    categories = {}
    for name, urls in raw.items():
        if isinstance(urls, str):
            urls = [urls]
        if not isinstance(urls, list):
            raise ConfigError(f"Category '{name}' must list URLs in {config_path}")
        categories[str(name)] = [str(url).strip() for url in urls if url]
    return categories
