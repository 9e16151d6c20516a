import json
import os
from dataclasses import dataclass
from typing import Any

from loguru import logger


@dataclass(frozen=True)
class RunPaths:
    """Locations of the local state and snapshots for one language."""
    data_dir: str
    language: str

    def _path(self, folder: str, suffix: str) -> str:
        return os.path.join(self.data_dir, folder, f"{self.language}-{suffix}.json")

    @property
    def url_cache(self) -> str:
        return self._path('cache', 'urls')

    @property
    def summary_cache(self) -> str:
        return self._path('cache', 'summaries')

    @property
    def run_log(self) -> str:
        return self._path('logs', 'log')

    @property
    def raw_output(self) -> str:
        return self._path('output', 'raw')

    @property
    def grouped_output(self) -> str:
        return self._path('output', 'grouped')

    @property
    def summarized_output(self) -> str:
        return self._path('output', 'summarized')


def write_json(file_path: str, data: Any) -> None:
    """Overwrite a JSON file, creating its directory when needed."""
    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.debug(f"💾 Wrote {file_path}")
