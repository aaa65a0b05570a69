"""FEM 재료 모델: 선형 탄성, 초탄성, 비압축성, 점탄성 구성 모델."""

from .base import FemMaterial
from .params import ParamsModel, Parameterized
from .viscoelastic import MaterialStateObject, ViscoelasticBehavior, QLVBehavior, QLVState
from .linear_elastic import LinearMaterial
from .st_venant_kirchhoff import StVenantKirchhoffMaterial
from .neo_hookean import NeoHookeanMaterial
from .incompressible import BulkPotential, IncompressibleMaterial, IncompressibleMaterialBase
from .invariant import InvariantHyperelastic
from .incomp_neo_hookean import IncompNeoHookeanMaterial
from .mooney_rivlin import MooneyRivlinMaterial
from .cubic_hyperelastic import CubicHyperelastic
from .ogden import OgdenMaterial
from .fung import FungMaterial
from .null_material import NullMaterial
from .registry import MaterialRegistry, create_default_registry
from .batch import BatchStressEvaluator

__all__ = [
    "FemMaterial",
    "ParamsModel",
    "Parameterized",
    "MaterialStateObject",
    "ViscoelasticBehavior",
    "QLVBehavior",
    "QLVState",
    "LinearMaterial",
    "StVenantKirchhoffMaterial",
    "NeoHookeanMaterial",
    "BulkPotential",
    "IncompressibleMaterial",
    "IncompressibleMaterialBase",
    "InvariantHyperelastic",
    "IncompNeoHookeanMaterial",
    "MooneyRivlinMaterial",
    "CubicHyperelastic",
    "OgdenMaterial",
    "FungMaterial",
    "NullMaterial",
    "MaterialRegistry",
    "create_default_registry",
    "BatchStressEvaluator",
]
