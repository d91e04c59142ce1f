"""
Reference Data Module

Contains JSON databases for:
- Bilingual phrase table (phrase_table.json)
"""

import json
from pathlib import Path
from typing import Any, Dict

DATA_DIR = Path(__file__).parent


def load_json_db(filename: str) -> Dict[str, Any]:
    """Load a JSON database file from the data directory."""
    filepath = DATA_DIR / filename
    if not filepath.exists():
        raise FileNotFoundError(f"JSON database not found: {filepath}")
    with open(filepath, "r", encoding="utf-8") as f:
        return json.load(f)


def get_phrase_table() -> Dict[str, Any]:
    """Load the bilingual phrase table database."""
    return load_json_db("phrase_table.json")
