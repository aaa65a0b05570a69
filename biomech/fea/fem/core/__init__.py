"""FEM 코어: 적분점 스냅샷과 텐서 대수."""

from .deformed_point import DeformedPoint
from . import tensor

__all__ = ["DeformedPoint", "tensor"]
