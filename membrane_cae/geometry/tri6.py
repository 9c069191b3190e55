"""TRI6 幾何 — 6 節点二次三角形.

節点順は Abaqus CPS6 と同じ:
    0,1,2 : 頂点
    3,4,5 : 各辺の中点 (0-1, 1-2, 2-0)

面積座標 L1 = 1 − ξ − η, L2 = ξ, L3 = η を用いて:
  N0 = L1(2L1−1),  N1 = L2(2L2−1),  N2 = L3(2L3−1)
  N3 = 4 L1 L2,    N4 = 4 L2 L3,    N5 = 4 L3 L1
"""

from __future__ import annotations

import logging

import numpy as np

from membrane_cae.core.errors import InvalidGeometry
from membrane_cae.geometry.isoparametric import IsoparametricGeometry2D
from membrane_cae.geometry.quadrature import QuadRule, triangle_rule

logger = logging.getLogger(__name__)

_NODE_NATURAL = np.array(
    [[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [0.5, 0.0], [0.5, 0.5], [0.0, 0.5]]
)
_NODE_NATURAL.flags.writeable = False
# 中間節点 3,4,5 の両端頂点
_EDGE_ENDS = ((0, 1), (1, 2), (2, 0))


class Tri6Geometry(IsoparametricGeometry2D):
    """TRI6二次三角形の幾何（GeometryProtocol適合）.

    既定の積分則は 6 点（4次精度）。N_i N_j は4次なので整合質量行列は厳密。
    直線辺（中間節点が辺の中点）の場合 detJ は一定。
    """

    nnodes: int = 6
    node_natural = _NODE_NATURAL

    def shape_functions(self, point: np.ndarray) -> np.ndarray:
        xi, eta = point
        L1, L2, L3 = 1.0 - xi - eta, xi, eta
        return np.array(
            [
                L1 * (2.0 * L1 - 1.0),
                L2 * (2.0 * L2 - 1.0),
                L3 * (2.0 * L3 - 1.0),
                4.0 * L1 * L2,
                4.0 * L2 * L3,
                4.0 * L3 * L1,
            ]
        )

    def natural_derivatives(self, point: np.ndarray) -> np.ndarray:
        xi, eta = point
        L1 = 1.0 - xi - eta
        # dL1/dξ = dL1/dη = -1, dL2/dξ = 1, dL3/dη = 1
        dN_dxi = np.array(
            [
                -(4.0 * L1 - 1.0),
                4.0 * xi - 1.0,
                0.0,
                4.0 * (L1 - xi),
                4.0 * eta,
                -4.0 * eta,
            ]
        )
        dN_deta = np.array(
            [
                -(4.0 * L1 - 1.0),
                0.0,
                4.0 * eta - 1.0,
                -4.0 * xi,
                4.0 * xi,
                4.0 * (L1 - eta),
            ]
        )
        return np.vstack((dN_dxi, dN_deta))

    def _default_rule(self) -> QuadRule:
        return triangle_rule(6)

    def _rule_for(self, order: int) -> QuadRule:
        return triangle_rule(order)

    def check_jacobian(self) -> None:
        """要素全域で detJ > det_j_tol を確認する.

        曲辺 TRI6 の detJ は (ξ, η) の二次式で、節点と積分点の間で負になり得る。
        節点での detJ を二次 Bernstein 係数に変換し、全係数が閾値を超えることを要求する:
          b_i  = detJ(頂点 i)
          b_ij = 2 detJ(辺 ij の中点) − (b_i + b_j) / 2
        detJ は係数の凸結合なので min(b) > tol なら要素全域で detJ > tol（十分条件）。

        Raises:
            InvalidGeometry: いずれかの係数が閾値以下
        """
        super().check_jacobian()
        det = np.array([self.jacobian(p)[1] for p in self.node_natural])
        bern = det.copy()
        for k, (i, j) in enumerate(_EDGE_ENDS, start=3):
            bern[k] = 2.0 * det[k] - 0.5 * (det[i] + det[j])
        tol = self.config.det_j_tol
        if bern.min() <= tol:
            logger.debug("%r: detJ Bernstein coefficients %s", self, bern)
            raise InvalidGeometry(
                f"detJ の Bernstein 係数 min={bern.min():.3e} <= {tol}（曲辺での反転の可能性）"
            )
