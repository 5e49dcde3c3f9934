"""
Local run state kept as JSON files under the data directory.
"""

import json
import logging
import os
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Set

from . import config

logger = logging.getLogger("dredger.storage")


class StorageManager:
    def __init__(self, data_dir: str = config.DATA_DIR, freshness_days: int = config.FRESHNESS_DAYS,
                 flush_threshold: int = config.FLUSH_THRESHOLD):
        self.data_dir = data_dir
        os.makedirs(self.data_dir, exist_ok=True)
        self.visited_file = os.path.join(data_dir, config.VISITED_FILE)
        self.unmapped_file = os.path.join(data_dir, config.UNMAPPED_FILE)
        self.history_file = os.path.join(data_dir, config.HISTORY_FILE)

        self.visited: Dict[str, str] = self._load_json(self.visited_file, {})
        self.unmapped: Set[str] = set(self._load_json(self.unmapped_file, []))
        self.history: List[dict] = self._load_json(self.history_file, [])

        self.freshness = timedelta(days=freshness_days)
        self._changes_since_flush = 0
        self._flush_threshold = flush_threshold

    def _load_json(self, filename: str, default):
        if os.path.exists(filename):
            try:
                with open(filename, 'r') as f:
                    data = json.load(f)
                if isinstance(data, type(default)):
                    return data
                logger.warning(f"Ignoring {filename}: unexpected shape")
            except (OSError, ValueError) as e:
                logger.warning(f"Error loading {filename}: {e}")
        return default

    def _save_json(self, filename: str, data):
        tmp = f"{filename}.tmp"
        with open(tmp, 'w') as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, filename)

    def is_fresh(self, url: str, now: Optional[datetime] = None) -> bool:
        stamp = self.visited.get(url)
        if not stamp:
            return False
        try:
            visited_at = datetime.fromisoformat(stamp)
        except ValueError:
            return False
        return (now or datetime.now()) - visited_at < self.freshness

    def mark_visited(self, url: str, now: Optional[datetime] = None):
        self.visited[url] = (now or datetime.now()).isoformat()
        self._changes_since_flush += 1
        self._auto_flush()

    def add_unmapped(self, categories: Iterable[str]):
        new = set(categories) - self.unmapped
        if new:
            self.unmapped.update(new)
            self._changes_since_flush += len(new)
            self._auto_flush()

    def record_run(self, stats: dict, started_at: datetime, status: str):
        self.history.append({
            'started_at': started_at.isoformat(),
            'finished_at': datetime.now().isoformat(),
            'status': status,
            **stats,
        })
        self.history = self.history[-config.HISTORY_LIMIT:]
        self._changes_since_flush += 1

    def _auto_flush(self):
        if self._changes_since_flush >= self._flush_threshold:
            self.flush_all()

    def flush_all(self):
        self._save_json(self.visited_file, self.visited)
        self._save_json(self.unmapped_file, sorted(self.unmapped))
        self._save_json(self.history_file, self.history)
        self._changes_since_flush = 0
