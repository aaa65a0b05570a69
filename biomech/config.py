"""코어 설정: Pydantic 모델 + TOML 로드."""

import logging
import tomllib
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field


class MaterialConfig(BaseModel):
    """구성 재료 평가 설정."""

    # 수치 접선(F 섭동) 중심차분 스텝
    tangent_perturbation: float = Field(default=1e-6, gt=0.0, lt=1e-2)


class JointConfig(BaseModel):
    """관절 결합 설정."""

    break_speed: float = Field(default=1e-8, ge=0.0)
    break_accel: float = Field(default=1e-8, ge=0.0)
    contact_distance: float = Field(default=1e-8, ge=0.0)
    axis_length: float = Field(default=0.0, ge=0.0)


class LoggingConfig(BaseModel):
    """로깅 설정."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"


class CoreConfig(BaseModel):
    """최상위 코어 설정."""

    material: MaterialConfig = Field(default_factory=MaterialConfig)
    joint: JointConfig = Field(default_factory=JointConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_toml(cls, path: str | Path) -> "CoreConfig":
        """TOML 파일에서 설정 로드.

        Args:
            path: TOML 파일 경로

        Returns:
            CoreConfig 인스턴스
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"설정 파일을 찾을 수 없습니다: {path}")

        with open(path, "rb") as f:
            data = tomllib.load(f)

        return cls(**data)

    @classmethod
    def default(cls) -> "CoreConfig":
        """기본 설정 반환."""
        return cls()


# 프로세스 전역 설정 (솔버 스텝 사이에서만 교체)
_active_config: CoreConfig = CoreConfig.default()


def get_config() -> CoreConfig:
    """현재 활성 설정 반환."""
    return _active_config


def set_config(config: CoreConfig) -> CoreConfig:
    """활성 설정 교체.

    Returns:
        이전 설정 (테스트에서 복원용)
    """
    global _active_config
    previous = _active_config
    _active_config = config
    return previous


def configure_logging(config: Optional[CoreConfig] = None):
    """biomech 로거 트리에 로그 레벨 적용."""
    config = config or _active_config
    level = getattr(logging, config.logging.level)
    logging.getLogger("biomech").setLevel(level)
