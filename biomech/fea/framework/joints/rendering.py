"""관절 렌더링 계약.

관절은 축 끝점 두 개와 렌더 속성을 Renderer에 넘길 뿐 상태를 바꾸지 않는다.
"""

import enum
import numpy as np
from dataclasses import dataclass, field, replace
from typing import Optional, Protocol, Tuple


class LineStyle(enum.Enum):
    """축 선 표현 방식."""
    LINE = "line"
    CYLINDER = "cylinder"
    SOLID_ARROW = "solid_arrow"
    SPINDLE = "spindle"


class RenderFlags(enum.IntFlag):
    NONE = 0
    SELECTED = 1


@dataclass
class RenderProps:
    """선 렌더 속성."""
    line_style: LineStyle = LineStyle.LINE
    line_width: int = 1
    line_radius: float = 1.0
    line_color: Tuple[float, float, float] = field(default=(0.5, 0.5, 0.5))
    visible: bool = True

    def copy(self) -> "RenderProps":
        return replace(self)


class Renderer(Protocol):
    """관절이 사용하는 렌더러 인터페이스."""

    def draw_line(
        self,
        props: RenderProps,
        p0: np.ndarray,
        p1: np.ndarray,
        color: Optional[Tuple[float, float, float]] = None,
        capped: bool = True,
        selected: bool = False,
    ) -> None:
        ...
