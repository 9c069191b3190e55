"""膜要素の物理 — 平面内 2 自由度/節点、曲げ・面外剛性なし.

幾何（形状関数・積分）は GeometryProtocol 経由で受け取り、本モジュールは
材料記述子と形状関数微分から要素行列を組み立てるだけの純関数群とする。

== 定式化 ==

DOF 順: [u0, v0, u1, v1, ..., u_{N-1}, v_{N-1}]
ひずみ: ε = [εxx, εyy, γxy]（工学せん断ひずみ γxy = ∂u/∂y + ∂v/∂x）

  B (3 × 2N):
    B[0, 2i]   = dNi/dx
    B[1, 2i+1] = dNi/dy
    B[2, 2i]   = dNi/dy,  B[2, 2i+1] = dNi/dx

  D (3 × 3): 平面応力（constitutive_plane_stress）
  M (2N × 2N): ρh ∫ Ni Nj dA を 2×2 単位ブロックに展開（u-v 連成なし）
  K (2N × 2N): h ∫ Bᵀ D B dA
"""

from __future__ import annotations

import logging

import numpy as np

from membrane_cae.core.errors import DimensionMismatch, IncompatibleMaterial
from membrane_cae.core.geometry import GeometryProtocol
from membrane_cae.materials.elastic import PlaneStressElastic, constitutive_plane_stress

logger = logging.getLogger(__name__)

_I2 = np.eye(2)


# ============================================================
# 純関数
# ============================================================


def membrane_b_matrix(dN_dx: np.ndarray, nnodes: int | None = None) -> np.ndarray:
    """ひずみ-変位行列 B (3 × 2N) を構築.

    Args:
        dN_dx: (N, 2) 全体座標での形状関数微分 [dN/dx, dN/dy]
        nnodes: 要素の節点数。指定時は N と一致しなければならない。

    Returns:
        B: (3, 2N)

    Raises:
        DimensionMismatch: dN_dx が (N, 2) でない、または N != nnodes
    """
    dN_dx = np.asarray(dN_dx, dtype=float)
    if dN_dx.ndim != 2 or dN_dx.shape[1] != 2:
        raise DimensionMismatch(f"dN_dx は (N,2) が必要。実際: {dN_dx.shape}")
    n = dN_dx.shape[0]
    if nnodes is not None and n != nnodes:
        raise DimensionMismatch(f"形状関数微分の節点数 {n} が要素の節点数 {nnodes} と不一致")

    B = np.zeros((3, 2 * n), dtype=float)
    B[0, 0::2] = dN_dx[:, 0]  # εxx = du/dx
    B[1, 1::2] = dN_dx[:, 1]  # εyy = dv/dy
    B[2, 0::2] = dN_dx[:, 1]  # γxy = du/dy + dv/dx
    B[2, 1::2] = dN_dx[:, 0]
    return B


def membrane_d_matrix(material: PlaneStressElastic) -> np.ndarray:
    """平面応力の材料行列 D (3×3)."""
    return constitutive_plane_stress(material.E, material.nu)


def membrane_mass_matrix(
    geometry: GeometryProtocol,
    material: PlaneStressElastic,
    *,
    lumped: bool = False,
) -> np.ndarray:
    """整合質量行列 (2N × 2N).

    スカラー質量 m_ij = ρh ∫ Ni Nj dA を1回の積分で求め、各成分を
    2×2 単位行列倍のブロックに展開する。外積 Ni Nj と同一の加算順序により
    m_ij == m_ji はビット単位で成立する（事後の対称化はしない）。

    Args:
        geometry: 幾何プロバイダ
        material: 平面応力材料
        lumped: True の場合は集中質量行列（HRZ法）

    Returns:
        Me: (2N, 2N) 質量行列

    Raises:
        InvalidGeometry: 反転・退化要素（幾何プロバイダから伝播）
    """

    def _nn(point: np.ndarray) -> np.ndarray:
        N = geometry.shape_functions(point)
        return np.outer(N, N)

    nn = geometry.integrate(_nn)

    if lumped:
        # HRZ: 対角成分を総面積（= Σ ∫Ni Nj dA）が保存されるようスケーリング
        diag = np.diag(nn)
        nn = np.diag(diag * (nn.sum() / diag.sum()))

    return np.kron(material.mass_per_area * nn, _I2)


def membrane_stiffness_matrix(
    geometry: GeometryProtocol, material: PlaneStressElastic
) -> np.ndarray:
    """要素剛性行列 K = h ∫ Bᵀ D B dA (2N × 2N).

    Raises:
        InvalidGeometry: 反転・退化要素（幾何プロバイダから伝播）
    """
    D = membrane_d_matrix(material)
    nnodes = geometry.nnodes

    def _btdb(point: np.ndarray) -> np.ndarray:
        B = membrane_b_matrix(geometry.shape_derivatives(point), nnodes)
        return B.T @ D @ B

    return material.thickness * geometry.integrate(_btdb)


def membrane_strain(
    geometry: GeometryProtocol, u_elem: np.ndarray, point: np.ndarray
) -> np.ndarray:
    """自然座標 point でのひずみ [εxx, εyy, γxy]."""
    u_elem = np.asarray(u_elem, dtype=float)
    if u_elem.shape != (2 * geometry.nnodes,):
        raise DimensionMismatch(
            f"u_elem は ({2 * geometry.nnodes},) が必要。実際: {u_elem.shape}"
        )
    B = membrane_b_matrix(geometry.shape_derivatives(point), geometry.nnodes)
    return B @ u_elem


def membrane_stress(
    geometry: GeometryProtocol,
    material: PlaneStressElastic,
    u_elem: np.ndarray,
    point: np.ndarray,
) -> np.ndarray:
    """自然座標 point での応力 [σxx, σyy, τxy] = D ε."""
    return membrane_d_matrix(material) @ membrane_strain(geometry, u_elem, point)


# ============================================================
# PhysicsProtocol 適合クラス
# ============================================================


class MembranePhysics:
    """2D 膜要素の物理戦略（PhysicsProtocol適合）.

    状態を持たないので、1インスタンスを任意個の要素・スレッドで共有できる。
    受け付ける材料は PlaneStressElastic のみ。
    """

    ndof_per_node: int = 2
    material_kind: type = PlaneStressElastic

    def __repr__(self) -> str:
        return "MembranePhysics()"

    def check_material(self, material: object) -> None:
        """材料種別の検査.

        Raises:
            IncompatibleMaterial: PlaneStressElastic 以外
        """
        if not isinstance(material, self.material_kind):
            raise IncompatibleMaterial(
                f"膜要素は {self.material_kind.__name__} のみ受け付けます: "
                f"{type(material).__name__}"
            )

    def strain_displacement_matrix(
        self, dN_dx: np.ndarray, nnodes: int | None = None
    ) -> np.ndarray:
        """B 行列 (3, 2N)."""
        return membrane_b_matrix(dN_dx, nnodes)

    def material_matrix(self, material: PlaneStressElastic) -> np.ndarray:
        """D 行列 (3, 3)."""
        self.check_material(material)
        return membrane_d_matrix(material)

    def mass_matrix(
        self,
        geometry: GeometryProtocol,
        material: PlaneStressElastic,
        *,
        lumped: bool = False,
    ) -> np.ndarray:
        """質量行列 (2N, 2N)."""
        self.check_material(material)
        Me = membrane_mass_matrix(geometry, material, lumped=lumped)
        logger.debug("mass matrix %s (lumped=%s) for %r", Me.shape, lumped, geometry)
        return Me

    def stiffness_matrix(
        self, geometry: GeometryProtocol, material: PlaneStressElastic
    ) -> np.ndarray:
        """剛性行列 (2N, 2N)."""
        self.check_material(material)
        Ke = membrane_stiffness_matrix(geometry, material)
        logger.debug("stiffness matrix %s for %r", Ke.shape, geometry)
        return Ke

    def strain(
        self, geometry: GeometryProtocol, u_elem: np.ndarray, point: np.ndarray
    ) -> np.ndarray:
        """ひずみ (3,)."""
        return membrane_strain(geometry, u_elem, point)

    def stress(
        self,
        geometry: GeometryProtocol,
        material: PlaneStressElastic,
        u_elem: np.ndarray,
        point: np.ndarray,
    ) -> np.ndarray:
        """応力 (3,)."""
        self.check_material(material)
        return membrane_stress(geometry, material, u_elem, point)
