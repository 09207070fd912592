"""
Analysis Settings

컴포넌트별 Config 데이터클래스를 하나로 묶은 AnalysisConfig와
JSON 설정 파일 로더.

JSON 예시:
    {
        "segmenter": {"bbox_samples": 36},
        "scoring": {"notable_threshold": 0.6},
        "parallel": true
    }
"""

import logging
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from iridology.analysis.insight_aggregator import ScoringConfig
from iridology.analysis.texture_analyzer import TextureConfig
from iridology.core.color_analyzer import ColorConfig
from iridology.core.zone_segmenter import SegmenterConfig
from iridology.data.config_manager import ConfigManager

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """설정 파일 오류 (알 수 없는 키, 잘못된 값)"""


@dataclass
class AnalysisConfig:
    """분석 파이프라인 전체 설정"""

    segmenter: SegmenterConfig = field(default_factory=SegmenterConfig)
    color: ColorConfig = field(default_factory=ColorConfig)
    texture: TextureConfig = field(default_factory=TextureConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    parallel: bool = False
    max_workers: int = 4

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisConfig":
        manager = ConfigManager(data=dict(data))
        sections = {
            "segmenter": SegmenterConfig,
            "color": ColorConfig,
            "texture": TextureConfig,
            "scoring": ScoringConfig,
        }
        unknown = set(manager.keys()) - set(sections) - {"parallel", "max_workers"}
        if unknown:
            raise ConfigError(f"Unknown config sections: {sorted(unknown)}")

        built: Dict[str, Any] = {}
        for name, config_cls in sections.items():
            if not isinstance(manager.get(name, {}), dict):
                raise ConfigError(f"Config section '{name}' must be an object")
            built[name] = _build_section(config_cls, manager.section(name), name)

        parallel = manager.get("parallel", False)
        if not isinstance(parallel, bool):
            raise ConfigError(f"parallel must be true or false (got {parallel!r})")
        max_workers = manager.get("max_workers", 4)
        if not isinstance(max_workers, int) or isinstance(max_workers, bool) or max_workers < 1:
            raise ConfigError(f"max_workers must be a positive integer (got {max_workers!r})")

        return cls(parallel=parallel, max_workers=max_workers, **built)


# 단위 구간 [0, 1] 밖의 값을 허용하는 float 필드 (필드명 → 최대값)
_FLOAT_UPPER_BOUNDS = {"unusual_hue_delta": 360.0}

# 1 이상이어야 하는 int 필드
_POSITIVE_INT_FIELDS = {"bbox_samples", "secondary_sample_size", "variation_sample_size"}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_value(section: str, name: str, field_type: Any, value: Any) -> Any:
    """필드 타입과 범위를 검사하고 정규화된 값을 반환"""
    key = f"{section}.{name}"

    if field_type is int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigError(f"{key} must be an integer (got {value!r})")
        minimum = 1 if name in _POSITIVE_INT_FIELDS else 0
        if value < minimum:
            raise ConfigError(f"{key} must be >= {minimum} (got {value})")
        return value

    if field_type is float or field_type == Optional[float]:
        if value is None and field_type != float:
            return None
        if not _is_number(value):
            raise ConfigError(f"{key} must be a number (got {value!r})")
        upper = _FLOAT_UPPER_BOUNDS.get(name, 1.0)
        if not 0.0 <= value <= upper:
            raise ConfigError(f"{key} must be between 0 and {upper:g} (got {value})")
        return float(value)

    return value


def _build_section(config_cls, values: Dict[str, Any], section: str):
    allowed = {f.name: f.type for f in fields(config_cls)}
    unknown = set(values) - set(allowed)
    if unknown:
        raise ConfigError(f"Unknown keys in '{section}': {sorted(unknown)}")
    checked = {name: _check_value(section, name, allowed[name], value) for name, value in values.items()}
    return replace(config_cls(), **checked)


def load_analysis_config(path: Optional[Path] = None) -> AnalysisConfig:
    """
    JSON 설정 파일에서 AnalysisConfig 로드.

    Args:
        path: 설정 파일 경로 (None이면 기본값)

    Raises:
        FileNotFoundError: 파일이 없을 때
        ConfigError: 알 수 없는 섹션/키, 타입 또는 범위가 잘못된 값
    """
    if path is None:
        return AnalysisConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    manager = ConfigManager(path=path)
    config = AnalysisConfig.from_dict(manager.as_dict())
    logger.info(f"Loaded analysis config from {path}")
    return config


def save_analysis_config(config: AnalysisConfig, path: Path) -> Path:
    """AnalysisConfig를 load_analysis_config가 읽을 수 있는 JSON으로 저장"""
    path = Path(path)
    manager = ConfigManager()
    for section, values in config.to_dict().items():
        if isinstance(values, dict):
            for key, value in values.items():
                manager.set(f"{section}.{key}", value)
        else:
            manager.set(section, values)
    manager.save(path)
    logger.info(f"Saved analysis config to {path}")
    return path
