from pathlib import Path
from typing import Any, Dict, Optional

from iridology.utils.file_io import read_json, write_json


class ConfigManager:
    """점(.) 구분 키로 접근하는 JSON 설정 저장소"""

    def __init__(self, path: Optional[Path] = None, data: Optional[Dict] = None):
        self.config_path = Path(path) if path else None
        self._config: Dict[str, Any] = {}
        if data:
            self._config = data
        elif self.config_path and self.config_path.exists():
            self._config = read_json(self.config_path)

    def get(self, key: str, default: Any = None) -> Any:
        val: Any = self._config
        for k in key.split("."):
            if not isinstance(val, dict) or k not in val:
                return default
            val = val[k]
        return val

    def set(self, key: str, value: Any):
        keys = key.split(".")
        val = self._config
        for k in keys[:-1]:
            val = val.setdefault(k, {})
        val[keys[-1]] = value

    def section(self, key: str) -> Dict[str, Any]:
        value = self.get(key, {})
        return dict(value) if isinstance(value, dict) else {}

    def keys(self):
        return list(self._config.keys())

    def as_dict(self) -> Dict[str, Any]:
        return self._config

    def save(self, path: Optional[Path] = None):
        target = path or self.config_path
        if target:
            write_json(self._config, target)
