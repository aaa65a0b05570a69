"""닫힌 실수 구간 [lower, upper] (±inf 허용)."""

import math
import re

from ...fem.validation import FEAValidationError

_INTERVAL_RE = re.compile(r"^\s*\[\s*([^,\s]+)\s*,\s*([^\]\s]+)\s*\]\s*$")


class DoubleInterval:
    """관절 좌표 범위."""

    __slots__ = ("_lower", "_upper")

    def __init__(self, lower: float = -math.inf, upper: float = math.inf):
        lower = float(lower)
        upper = float(upper)
        if math.isnan(lower) or math.isnan(upper) or lower > upper:
            raise FEAValidationError(
                f"구간 [{lower}, {upper}]이(가) 유효하지 않습니다. lower ≤ upper 여야 합니다.",
                parameter="range",
                value=(lower, upper),
            )
        self._lower = lower
        self._upper = upper

    @classmethod
    def parse(cls, text: str) -> "DoubleInterval":
        """"[lo, hi]" 형식 파싱 ("inf", "-inf" 허용)."""
        m = _INTERVAL_RE.match(text)
        if m is None:
            raise FEAValidationError(
                f"구간 문자열 '{text}'을(를) 해석할 수 없습니다.",
                parameter="range",
                suggestion='"[-30, 30]" 또는 "[-inf, inf]" 형식',
            )
        try:
            return cls(float(m.group(1)), float(m.group(2)))
        except ValueError as e:
            if isinstance(e, FEAValidationError):
                raise
            raise FEAValidationError(
                f"구간 문자열 '{text}'의 끝점이 숫자가 아닙니다.",
                parameter="range",
            ) from e

    @property
    def lower(self) -> float:
        return self._lower

    @property
    def upper(self) -> float:
        return self._upper

    def is_bounded(self) -> bool:
        return math.isfinite(self._lower) and math.isfinite(self._upper)

    def contains(self, value: float) -> bool:
        return self._lower <= value <= self._upper

    def clip_to_range(self, value: float) -> float:
        """가장 가까운 끝점으로 자르기."""
        return min(max(float(value), self._lower), self._upper)

    def make_valid(self, value: float) -> float:
        """clip_to_range와 같지만 NaN은 구간 안의 0에 가장 가까운 값으로 바꾼다."""
        if math.isnan(value):
            return self.clip_to_range(0.0)
        return self.clip_to_range(value)

    def copy(self) -> "DoubleInterval":
        return DoubleInterval(self._lower, self._upper)

    def __iter__(self):
        yield self._lower
        yield self._upper

    def __eq__(self, other) -> bool:
        if not isinstance(other, DoubleInterval):
            return NotImplemented
        return self._lower == other._lower and self._upper == other._upper

    def __hash__(self):
        return hash((self._lower, self._upper))

    def __repr__(self) -> str:
        return f"[{self._lower:g}, {self._upper:g}]"
