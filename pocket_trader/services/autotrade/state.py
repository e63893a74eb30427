"""Persisted auto-trade switch"""
import json
from pathlib import Path
from typing import Union
from loguru import logger


class AutoTradeStateStore:
    """Keeps the enabled flag in a small JSON file across restarts"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> bool:
        if not self.path.exists():
            return False
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable auto-trade state {self.path}: {e}")
            return False
        return bool(data.get("autoTradeEnabled", False))

    def save(self, enabled: bool) -> None:
        self.path.write_text(json.dumps({"autoTradeEnabled": enabled}), encoding="utf-8")
