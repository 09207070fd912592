"""
유틸: 래스터 이미지 디코딩/검증 보조 함수 모음.

분석 코어는 (H, W, 3) uint8 RGB 배열만 다룬다.
"""

from __future__ import annotations

import cv2
import numpy as np


class ImageValidationError(ValueError):
    """이미지 유효성 오류"""


class ImageDecodeError(ImageValidationError):
    """이미지 바이트 디코딩 실패 (분석 전체 중단)"""


def validate_image(image: np.ndarray, name: str = "image") -> None:
    if not isinstance(image, np.ndarray):
        raise ImageValidationError(f"{name} must be numpy.ndarray")
    if image.dtype != np.uint8:
        raise ImageValidationError(f"{name} must have dtype uint8")
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ImageValidationError(f"{name} must have 3 or 4 channels (H, W, C)")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise ImageValidationError(f"{name} must not be empty")


def to_rgb(image: np.ndarray) -> np.ndarray:
    """RGBA 입력이면 알파 채널을 버리고 RGB만 반환."""
    validate_image(image)
    if image.shape[2] == 4:
        return np.ascontiguousarray(image[:, :, :3])
    return image


def decode_image(data: bytes) -> np.ndarray:
    """
    인코딩된 이미지 바이트(PNG/JPEG 등)를 RGB 배열로 디코딩.

    Raises:
        ImageDecodeError: 비어 있거나 해석할 수 없는 바이트
    """
    if not data:
        raise ImageDecodeError("Image data is empty")
    buffer = np.frombuffer(data, dtype=np.uint8)
    image_bgr = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image_bgr is None:
        raise ImageDecodeError(f"Failed to decode iris image ({len(data)} bytes)")
    return cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB)


def encode_png(image_rgb: np.ndarray) -> bytes:
    """RGB 배열을 PNG 바이트로 인코딩."""
    image_rgb = to_rgb(image_rgb)
    ok, buffer = cv2.imencode(".png", cv2.cvtColor(image_rgb, cv2.COLOR_RGB2BGR))
    if not ok:
        raise ImageValidationError("Failed to encode image as PNG")
    return buffer.tobytes()
