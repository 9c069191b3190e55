"""membrane_cae.core - 幾何・物理・構成則の抽象インタフェース定義と例外.

Protocol 階層:
  GeometryProtocol          : 形状関数・全体座標微分・要素領域積分
  PhysicsProtocol           : B / D / M / K の計算（状態を持たない）
  ConstitutiveProtocol      : 構成則最小限（tangent のみ）
  MembraneMaterialProtocol  : 膜要素用材料記述子（+ E, nu, thickness, rho）
"""

from membrane_cae.core.constitutive import ConstitutiveProtocol, MembraneMaterialProtocol
from membrane_cae.core.errors import (
    DimensionMismatch,
    IncompatibleMaterial,
    InvalidGeometry,
    InvalidMaterial,
    MembraneError,
)
from membrane_cae.core.geometry import GeometryProtocol
from membrane_cae.core.physics import PhysicsProtocol

__all__ = [
    "GeometryProtocol",
    "PhysicsProtocol",
    "ConstitutiveProtocol",
    "MembraneMaterialProtocol",
    "MembraneError",
    "InvalidMaterial",
    "DimensionMismatch",
    "InvalidGeometry",
    "IncompatibleMaterial",
]
