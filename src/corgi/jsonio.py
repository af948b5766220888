from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

JSON_MARSHAL_PREFIX = ""
JSON_MARSHAL_INDENT = "  "


def load_json_data_from_file(path: Union[str, Path]) -> Optional[Dict[str, Any]]:
    """Parse a JSON object from ``path``; an empty file yields ``None``."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return None

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(raw, Mapping):
        raise ValueError(f"Config must be a JSON object: {path}")
    return dict(raw)


def dumps_indented(data: Any, prefix: str = JSON_MARSHAL_PREFIX, indent: str = JSON_MARSHAL_INDENT) -> str:
    # prefix goes on every line but the first
    text = json.dumps(data, indent=indent)
    if not prefix:
        return text
    return ("\n" + prefix).join(text.split("\n"))
