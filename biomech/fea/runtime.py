"""Taichi 런타임 초기화.

배치 응력 커널이 쓰는 Taichi 런타임을 프로세스당 한 번만 올린다.
AUTO 백엔드는 CUDA → Vulkan → CPU 순서로 시도하고, 정밀도 기본값은 f64이다.
"""

import enum
import logging
import taichi as ti
from typing import Optional

logger = logging.getLogger(__name__)


class Backend(enum.Enum):
    """Taichi 백엔드."""
    CPU = "cpu"
    VULKAN = "vulkan"
    CUDA = "cuda"
    METAL = "metal"
    AUTO = "auto"


class Precision(enum.Enum):
    """부동소수점 정밀도."""
    F32 = "f32"
    F64 = "f64"


_AUTO_ORDER = (Backend.CUDA, Backend.VULKAN, Backend.CPU)

_initialized = False
_active_backend: Optional[Backend] = None
_active_precision: Optional[Precision] = None


def init(backend: Backend = Backend.AUTO, precision: Precision = Precision.F64) -> dict:
    """Taichi 런타임 초기화 (중복 호출 시 기존 설정 반환).

    Args:
        backend: 백엔드 (AUTO면 CUDA → Vulkan → CPU)
        precision: 기본 부동소수점 정밀도

    Returns:
        {"backend", "precision", "already_initialized"}
    """
    global _initialized, _active_backend, _active_precision

    if _initialized:
        return _info(already=True)

    default_fp = ti.f64 if precision == Precision.F64 else ti.f32
    candidates = _AUTO_ORDER if backend == Backend.AUTO else (backend,)

    for candidate in candidates:
        try:
            ti.init(arch=_backend_to_arch(candidate), default_fp=default_fp)
        except Exception as e:
            if backend != Backend.AUTO:
                raise
            logger.debug(f"{candidate.value} 백엔드 실패: {e}")
            continue
        _active_backend = candidate
        break
    else:
        logger.warning("GPU 백엔드를 모두 사용할 수 없어 CPU로 초기화합니다")
        ti.init(arch=ti.cpu, default_fp=default_fp)
        _active_backend = Backend.CPU

    _active_precision = precision
    _initialized = True
    logger.info(f"Taichi 초기화: 백엔드={_active_backend.value}, 정밀도={precision.value}")
    return _info(already=False)


def get_ti_dtype():
    """현재 정밀도의 Taichi 실수 타입."""
    if _active_precision == Precision.F32:
        return ti.f32
    return ti.f64


def get_backend() -> Optional[Backend]:
    return _active_backend


def get_precision() -> Optional[Precision]:
    return _active_precision


def is_initialized() -> bool:
    return _initialized


def _info(already: bool) -> dict:
    return {
        "backend": _active_backend.value,
        "precision": _active_precision.value,
        "already_initialized": already,
    }


def _backend_to_arch(backend: Backend):
    return {
        Backend.CPU: ti.cpu,
        Backend.VULKAN: ti.vulkan,
        Backend.CUDA: ti.cuda,
        Backend.METAL: ti.metal,
    }[backend]
