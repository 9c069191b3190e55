"""物理戦略の抽象インタフェース定義.

要素 = 幾何プロバイダ 1 つ + 物理戦略 1 つ（合成）。
物理戦略は状態を持たず、材料と幾何を引数として受け取る純関数の集合とする。
幾何は GeometryProtocol を満たす任意の実装と組み合わせられる。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

from membrane_cae.core.constitutive import ConstitutiveProtocol
from membrane_cae.core.geometry import GeometryProtocol


@runtime_checkable
class PhysicsProtocol(Protocol):
    """要素物理の共通インタフェース.

    Attributes:
        ndof_per_node: 1節点あたりの自由度数（膜要素=2）

    適合クラス例:
      - MembranePhysics
    """

    ndof_per_node: int

    def check_material(self, material: object) -> None:
        """材料種別を検査し、受け付けない場合は IncompatibleMaterial を送出する."""
        ...

    def strain_displacement_matrix(
        self, dN_dx: np.ndarray, nnodes: int | None = None
    ) -> np.ndarray:
        """ひずみ-変位行列 B (3, ndof_per_node * nnodes) を返す."""
        ...

    def material_matrix(self, material: ConstitutiveProtocol) -> np.ndarray:
        """材料行列 D を返す."""
        ...

    def mass_matrix(
        self,
        geometry: GeometryProtocol,
        material: ConstitutiveProtocol,
        *,
        lumped: bool = False,
    ) -> np.ndarray:
        """質量行列を返す."""
        ...

    def stiffness_matrix(
        self, geometry: GeometryProtocol, material: ConstitutiveProtocol
    ) -> np.ndarray:
        """剛性行列 K = ∫ Bᵀ D B dV を返す."""
        ...

    def strain(
        self, geometry: GeometryProtocol, u_elem: np.ndarray, point: np.ndarray
    ) -> np.ndarray:
        """要素変位から自然座標 point でのひずみを返す."""
        ...

    def stress(
        self,
        geometry: GeometryProtocol,
        material: ConstitutiveProtocol,
        u_elem: np.ndarray,
        point: np.ndarray,
    ) -> np.ndarray:
        """要素変位から自然座標 point での応力を返す."""
        ...
