from __future__ import annotations

from pathlib import Path
from typing import Dict, Any


def get_assets_root(config: Dict[str, Any]) -> Path:
    root = config.get("assets_root", "assets")
    return Path(root).expanduser().resolve()


def icon_path(assets_root: Path, name: str) -> Path:
    return assets_root / "icons" / f"{name}.png"
