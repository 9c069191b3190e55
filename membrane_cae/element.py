"""要素 — 幾何プロバイダと物理戦略の合成.

  Element(geometry, physics, material, node_ids)

幾何と物理は継承ではなく保持（合成）で結合する。任意の GeometryProtocol 実装に
任意の PhysicsProtocol 実装を載せられる。行列要求はすべて物理戦略へ委譲する。

材料は参照で保持し（複製しない）、複数要素で共有してよい。
割り当て時に物理戦略が材料種別を検査し、不適合なら即座に IncompatibleMaterial を送出する。
"""

from __future__ import annotations

import logging

import numpy as np

from membrane_cae.core.constitutive import ConstitutiveProtocol
from membrane_cae.core.errors import DimensionMismatch
from membrane_cae.core.geometry import GeometryProtocol
from membrane_cae.core.physics import PhysicsProtocol

logger = logging.getLogger(__name__)


class Element:
    """有限要素（幾何 1 つ + 物理 1 つ + 材料 1 つ）.

    Args:
        geometry: 幾何プロバイダ
        physics: 物理戦略（例: MembranePhysics）
        material: 材料記述子。physics.check_material() を通過しなければならない。
        node_ids: (nnodes,) グローバル節点インデックス。None の場合は 0..nnodes-1。

    Raises:
        TypeError: geometry / physics が Protocol に適合しない
        IncompatibleMaterial: 物理戦略が受け付けない材料
        DimensionMismatch: node_ids の長さが幾何の節点数と不一致
    """

    def __init__(
        self,
        geometry: GeometryProtocol,
        physics: PhysicsProtocol,
        material: ConstitutiveProtocol,
        node_ids: np.ndarray | None = None,
    ) -> None:
        if not isinstance(geometry, GeometryProtocol):
            raise TypeError(f"GeometryProtocol に適合しません: {type(geometry).__name__}")
        if not isinstance(physics, PhysicsProtocol):
            raise TypeError(f"PhysicsProtocol に適合しません: {type(physics).__name__}")
        self.geometry = geometry
        self.physics = physics

        if node_ids is None:
            node_ids = np.arange(geometry.nnodes)
        node_ids = np.asarray(node_ids, dtype=np.int64)
        if node_ids.shape != (geometry.nnodes,):
            raise DimensionMismatch(
                f"node_ids は ({geometry.nnodes},) が必要。実際: {node_ids.shape}"
            )
        self.node_ids = node_ids

        physics.check_material(material)
        self._material = material

    def __repr__(self) -> str:
        return (
            f"Element(geometry={self.geometry!r}, physics={self.physics!r}, "
            f"material={self._material!r}, nodes={self.node_ids.tolist()})"
        )

    # ----- 自由度 -----
    @property
    def ndof_per_node(self) -> int:
        """1節点あたりの自由度数（膜要素=2）."""
        return self.physics.ndof_per_node

    @property
    def nnodes(self) -> int:
        return self.geometry.nnodes

    @property
    def ndof(self) -> int:
        return self.ndof_per_node * self.nnodes

    def dof_indices(self) -> np.ndarray:
        """グローバル節点インデックスから要素DOFインデックスを返す.

        Returns:
            edofs: (ndof,) グローバルDOFインデックス
        """
        k = self.ndof_per_node
        return (self.node_ids[:, None] * k + np.arange(k, dtype=np.int64)[None, :]).ravel()

    # ----- 材料 -----
    @property
    def material(self) -> ConstitutiveProtocol:
        return self._material

    @material.setter
    def material(self, material: ConstitutiveProtocol) -> None:
        self.physics.check_material(material)
        logger.debug("%r: material rebound to %r", self, material)
        self._material = material

    # ----- 物理への委譲 -----
    def strain_displacement_matrix(self, dN_dx: np.ndarray) -> np.ndarray:
        """B 行列. dN_dx の節点数は幾何の節点数と一致しなければならない."""
        return self.physics.strain_displacement_matrix(dN_dx, self.nnodes)

    def strain_displacement_matrix_at(self, point: np.ndarray) -> np.ndarray:
        """自然座標 point での B 行列（微分は幾何から取得）."""
        return self.strain_displacement_matrix(self.geometry.shape_derivatives(point))

    def material_matrix(self) -> np.ndarray:
        return self.physics.material_matrix(self._material)

    def mass_matrix(self, *, lumped: bool = False) -> np.ndarray:
        return self.physics.mass_matrix(self.geometry, self._material, lumped=lumped)

    def stiffness_matrix(self) -> np.ndarray:
        return self.physics.stiffness_matrix(self.geometry, self._material)

    def strain(self, u_elem: np.ndarray, point: np.ndarray) -> np.ndarray:
        """要素変位 u_elem (ndof,) から point でのひずみを返す."""
        return self.physics.strain(self.geometry, u_elem, point)

    def stress(self, u_elem: np.ndarray, point: np.ndarray) -> np.ndarray:
        """要素変位 u_elem (ndof,) から point での応力を返す."""
        return self.physics.stress(self.geometry, self._material, u_elem, point)
