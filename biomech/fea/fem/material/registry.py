"""재료 이름 → 생성자 레지스트리.

모델 파일/스크립트가 문자열 키로 재료를 만들 수 있게 한다.
기본 레지스트리는 create_default_registry()가 명시적으로 구성한다.
"""

import logging
from typing import Callable, Dict, List

from .base import FemMaterial
from .cubic_hyperelastic import CubicHyperelastic
from .fung import FungMaterial
from .incomp_neo_hookean import IncompNeoHookeanMaterial
from .incompressible import IncompressibleMaterial
from .linear_elastic import LinearMaterial
from .mooney_rivlin import MooneyRivlinMaterial
from .neo_hookean import NeoHookeanMaterial
from .null_material import NullMaterial
from .ogden import OgdenMaterial
from .st_venant_kirchhoff import StVenantKirchhoffMaterial
from ..validation import FEAValidationError

logger = logging.getLogger(__name__)

MaterialFactory = Callable[..., FemMaterial]


class MaterialRegistry:
    """재료 생성자 레지스트리."""

    def __init__(self):
        self._factories: Dict[str, MaterialFactory] = {}

    def register(self, name: str, factory: MaterialFactory, replace: bool = False):
        """생성자 등록.

        Raises:
            FEAValidationError: 이미 등록된 이름 (replace=False)
        """
        if name in self._factories and not replace:
            raise FEAValidationError(
                f"재료 '{name}'이(가) 이미 등록되어 있습니다.",
                parameter="name",
                value=name,
                suggestion="replace=True로 교체하세요",
            )
        self._factories[name] = factory
        logger.debug(f"재료 등록: {name}")

    def unregister(self, name: str):
        self._factories.pop(name, None)

    def create(self, name: str, **params) -> FemMaterial:
        """이름으로 재료 생성.

        Raises:
            KeyError: 등록되지 않은 이름
        """
        if name not in self._factories:
            raise KeyError(f"등록되지 않은 재료: '{name}' (사용 가능: {', '.join(self.names())})")
        return self._factories[name](**params)

    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def create_default_registry() -> MaterialRegistry:
    """기본 재료 10종이 등록된 레지스트리."""
    registry = MaterialRegistry()
    registry.register("linear", LinearMaterial)
    registry.register("st_venant_kirchhoff", StVenantKirchhoffMaterial)
    registry.register("neo_hookean", NeoHookeanMaterial)
    registry.register("incompressible", IncompressibleMaterial)
    registry.register("incomp_neo_hookean", IncompNeoHookeanMaterial)
    registry.register("mooney_rivlin", MooneyRivlinMaterial)
    registry.register("cubic_hyperelastic", CubicHyperelastic)
    registry.register("ogden", OgdenMaterial)
    registry.register("fung", FungMaterial)
    registry.register("null", NullMaterial)
    return registry
