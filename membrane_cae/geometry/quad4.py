"""Q4 幾何 — 4 節点双一次四角形.

節点順序（自然座標）:
  0: (-1,-1)  1: (+1,-1)  2: (+1,+1)  3: (-1,+1)

形状関数:
  N_i = ¼ (1 + ξ ξ_i)(1 + η η_i)

detJ は ξ, η それぞれについて一次なので、最小値は節点のいずれかで生じる。
IsoparametricGeometry2D.check_jacobian が節点でも判定するため、
積分点では正でも角で反転している要素を検出できる。
"""

from __future__ import annotations

import numpy as np

from membrane_cae.geometry.isoparametric import IsoparametricGeometry2D
from membrane_cae.geometry.quadrature import QuadRule, gauss_rule

_NODE_NATURAL = np.array([[-1.0, -1.0], [1.0, -1.0], [1.0, 1.0], [-1.0, 1.0]])
_NODE_NATURAL.flags.writeable = False


class Quad4Geometry(IsoparametricGeometry2D):
    """Q4双一次四角形の幾何（GeometryProtocol適合）."""

    nnodes: int = 4
    node_natural = _NODE_NATURAL

    def shape_functions(self, point: np.ndarray) -> np.ndarray:
        xi, eta = point
        return 0.25 * np.array(
            [
                (1.0 - xi) * (1.0 - eta),
                (1.0 + xi) * (1.0 - eta),
                (1.0 + xi) * (1.0 + eta),
                (1.0 - xi) * (1.0 + eta),
            ]
        )

    def natural_derivatives(self, point: np.ndarray) -> np.ndarray:
        xi, eta = point
        dN_dxi = 0.25 * np.array([-(1.0 - eta), +(1.0 - eta), +(1.0 + eta), -(1.0 + eta)])
        dN_deta = 0.25 * np.array([-(1.0 - xi), -(1.0 + xi), +(1.0 + xi), +(1.0 - xi)])
        return np.vstack((dN_dxi, dN_deta))

    def _default_rule(self) -> QuadRule:
        return gauss_rule(2)

    def _rule_for(self, order: int) -> QuadRule:
        return gauss_rule(order)
