"""
JSONL file writer for crash reports and analytic events.

Writes records to daily-rotated JSONL files so they can be shipped
to a central server by rsync or any log collector.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List


class JsonlWriter:
    """Writes records to daily-rotated JSONL files."""

    def __init__(self, output_dir: str):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def get_path(self, prefix: str) -> Path:
        """Get today's JSONL file path."""
        date_str = datetime.utcnow().strftime("%Y-%m-%d")
        return self.output_dir / f"{prefix}-{date_str}.jsonl"

    def write(self, prefix: str, records: List[Dict[str, Any]]) -> None:
        """Append JSON records to today's file for `prefix`."""
        if not records:
            return
        with open(self.get_path(prefix), "a", encoding="utf-8") as f:
            for record in records:
                f.write(json.dumps(record, default=str, ensure_ascii=False) + "\n")
