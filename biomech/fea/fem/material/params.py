"""재료 파라미터 레코드 + 호스트 변경 알림.

각 재료/점탄성 거동은 frozen Pydantic 모델로 파라미터를 선언한다.
설정자는 레코드 전체를 재검증한 뒤 교체하고, 실패하면 이전 레코드를 유지한 채
MaterialParameterError를 던진다. 변경된 필드 이름은 등록된 콜백으로 통지된다.
"""

import logging
from typing import ClassVar, List, Type

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from ..core import tensor
from ..validation import MaterialParameterError, validate_elastic_constants
from ....utils.properties import PropertyHost

logger = logging.getLogger(__name__)


class ParamsModel(BaseModel):
    """파라미터 레코드 공통 설정 (불변, 추가 필드 금지)."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class Parameterized(PropertyHost):
    """Pydantic 파라미터 레코드를 소유하고 변경을 통지하는 믹스인.

    레코드 필드는 PROPERTIES 선언과 함께 호스트 속성으로 노출된다.
    """

    Params: ClassVar[Type[ParamsModel]] = ParamsModel

    def _init_params(self, **values):
        self._init_listeners()
        self._params = self._validate_params(values)

    @property
    def params(self) -> ParamsModel:
        return self._params

    def _validate_params(self, values: dict) -> ParamsModel:
        try:
            return self.Params.model_validate(values)
        except ValidationError as e:
            raise MaterialParameterError(
                f"{type(self).__name__} 파라미터가 유효하지 않습니다: {_describe(e)}",
                parameter=_first_field(e),
            ) from e

    def _update_params(self, **changes):
        """파라미터 일부 변경. 실패 시 이전 레코드 유지."""
        merged = {**self._params.model_dump(), **changes}
        try:
            new_params = self._validate_params(merged)
        except MaterialParameterError as e:
            logger.warning(f"{type(self).__name__} 파라미터 거부, 이전 값 유지: {e}")
            # 거부된 필드도 통지 (값은 이전 레코드 그대로)
            for name in changes:
                if name in self.Params.model_fields:
                    self.notify_host_of_property_change(name)
            raise
        changed = [
            name for name in changes
            if getattr(self._params, name) != getattr(new_params, name)
        ]
        self._params = new_params
        if changed:
            self._on_params_changed()
            for name in changed:
                self.notify_host_of_property_change(name)

    def _on_params_changed(self):
        """의존 캐시 무효화 훅."""

    @classmethod
    def property_names(cls) -> List[str]:
        return super().property_names() + list(cls.Params.model_fields)


def _first_field(e: ValidationError) -> str:
    errors = e.errors()
    if errors and errors[0].get("loc"):
        return ".".join(str(part) for part in errors[0]["loc"])
    return ""


def _describe(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "record"
        parts.append(f"{loc}: {err.get('msg', '')}")
    return "; ".join(parts)


class IsotropicElasticParams(ParamsModel):
    """등방 탄성 상수 (E, ν)."""

    youngs_modulus: float = 500000.0
    poissons_ratio: float = 0.33

    @model_validator(mode="after")
    def _check_elastic(self):
        validate_elastic_constants(self.youngs_modulus, self.poissons_ratio, type(self).__name__)
        return self

    def lame(self):
        """(λ, μ)."""
        return tensor.lame_parameters(self.youngs_modulus, self.poissons_ratio)


class IsotropicElasticProperties:
    """E, ν 속성 접근자 (Parameterized 하위 클래스용)."""

    @property
    def youngs_modulus(self) -> float:
        return self.params.youngs_modulus

    @youngs_modulus.setter
    def youngs_modulus(self, value: float):
        self._update_params(youngs_modulus=value)

    @property
    def poissons_ratio(self) -> float:
        return self.params.poissons_ratio

    @poissons_ratio.setter
    def poissons_ratio(self, value: float):
        self._update_params(poissons_ratio=value)
