"""TRI3 幾何 — 3 節点一次三角形（定ひずみ）.

形状関数（面積座標）:
  N1 = 1 − ξ − η,  N2 = ξ,  N3 = η

節点順序（自然座標）:
  0: (0,0)  1: (1,0)  2: (0,1)   反時計回りで detJ = 2A > 0
"""

from __future__ import annotations

import numpy as np

from membrane_cae.geometry.isoparametric import IsoparametricGeometry2D
from membrane_cae.geometry.quadrature import QuadRule, triangle_rule

_DN_NAT = np.array([[-1.0, 1.0, 0.0], [-1.0, 0.0, 1.0]])
_DN_NAT.flags.writeable = False
_NODE_NATURAL = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
_NODE_NATURAL.flags.writeable = False


class Tri3Geometry(IsoparametricGeometry2D):
    """TRI3一次三角形の幾何（GeometryProtocol適合）."""

    nnodes: int = 3
    node_natural = _NODE_NATURAL

    def shape_functions(self, point: np.ndarray) -> np.ndarray:
        xi, eta = point
        return np.array([1.0 - xi - eta, xi, eta])

    def natural_derivatives(self, point: np.ndarray) -> np.ndarray:
        # 一次要素なので定数
        return _DN_NAT

    def _default_rule(self) -> QuadRule:
        return triangle_rule(3)

    def _rule_for(self, order: int) -> QuadRule:
        return triangle_rule(order)
