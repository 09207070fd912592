import json
from pathlib import Path
from typing import Any

import cv2
import numpy as np

from iridology.utils.image_utils import to_rgb


def read_bytes(filepath: Path) -> bytes:
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")
    # np.fromfile로 비ASCII 경로에서도 로딩 안정화
    return np.fromfile(str(filepath), dtype=np.uint8).tobytes()


def save_image(filepath: Path, image_rgb: np.ndarray) -> None:
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    image_bgr = cv2.cvtColor(to_rgb(image_rgb), cv2.COLOR_RGB2BGR)
    cv2.imwrite(str(filepath), image_bgr)


def read_json(filepath: Path) -> dict:
    filepath = Path(filepath)
    if filepath.exists():
        with open(filepath, "r", encoding="utf-8") as f:
            return json.load(f)
    return {}


def write_json(data: Any, filepath: Path):
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
