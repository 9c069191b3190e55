"""2D アイソパラメトリック要素幾何の共通機構.

サブクラスは以下を提供する:
  - node_natural: (nnodes, 2) 節点の自然座標
  - shape_functions(point): (nnodes,)
  - natural_derivatives(point): (2, nnodes), [dN/dξ; dN/dη]
  - _default_rule() / _rule_for(order): 積分則

ヤコビアン:
  J = [[dx/dξ, dy/dξ], [dx/dη, dy/dη]] = dN_nat @ coords
  [dN/dx; dN/dy] = J⁻¹ @ [dN/dξ; dN/dη]
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

import numpy as np

from membrane_cae.config import DEFAULT_INTEGRATION, IntegrationConfig
from membrane_cae.core.errors import DimensionMismatch, InvalidGeometry
from membrane_cae.geometry.quadrature import QuadRule

logger = logging.getLogger(__name__)


class IsoparametricGeometry2D(ABC):
    """2D アイソパラメトリック幾何の基底クラス（GeometryProtocol適合）.

    Args:
        coords: (nnodes, 2) 節点座標
        config: 積分設定（None で既定値）
    """

    nnodes: int
    node_natural: np.ndarray

    def __init__(self, coords: np.ndarray, config: IntegrationConfig | None = None) -> None:
        coords = np.array(coords, dtype=float)
        if coords.shape != (self.nnodes, 2):
            raise DimensionMismatch(
                f"{type(self).__name__}: coords は ({self.nnodes},2) が必要。実際: {coords.shape}"
            )
        coords.flags.writeable = False
        self.coords = coords
        self.config = config if config is not None else DEFAULT_INTEGRATION
        self.rule = (
            self._default_rule() if self.config.order is None else self._rule_for(self.config.order)
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(nnodes={self.nnodes}, npts={len(self.rule.weights)})"

    # ----- API each subclass must provide -----
    @abstractmethod
    def shape_functions(self, point: np.ndarray) -> np.ndarray:
        """形状関数 (nnodes,)."""

    @abstractmethod
    def natural_derivatives(self, point: np.ndarray) -> np.ndarray:
        """自然座標微分 (2, nnodes)."""

    @abstractmethod
    def _default_rule(self) -> QuadRule:
        """既定の積分則."""

    @abstractmethod
    def _rule_for(self, order: int) -> QuadRule:
        """IntegrationConfig.order に対応する積分則."""

    # ----- common machinery -----
    def jacobian(self, point: np.ndarray) -> tuple[np.ndarray, float]:
        """ヤコビアン行列と行列式を返す.

        Returns:
            (J, detJ): J は (2, 2)
        """
        J = self.natural_derivatives(point) @ self.coords
        detJ = float(J[0, 0] * J[1, 1] - J[0, 1] * J[1, 0])
        return J, detJ

    def _checked_jacobian(self, point: np.ndarray) -> tuple[np.ndarray, float]:
        J, detJ = self.jacobian(point)
        if detJ <= self.config.det_j_tol:
            logger.debug("%r: detJ=%.3e at point %s", self, detJ, point)
            raise InvalidGeometry(f"detJ={detJ:.3e} <= {self.config.det_j_tol}（反転/退化要素）")
        return J, detJ

    def shape_derivatives(self, point: np.ndarray) -> np.ndarray:
        """全体座標での形状関数微分 (nnodes, 2). 列は [dN/dx, dN/dy]."""
        dN_nat = self.natural_derivatives(point)
        J, detJ = self._checked_jacobian(point)
        invJ = np.array([[J[1, 1], -J[0, 1]], [-J[1, 0], J[0, 0]]], dtype=float) / detJ
        return (invJ @ dN_nat).T

    def check_jacobian(self) -> None:
        """積分点と節点の全てで detJ > det_j_tol を確認する.

        Raises:
            InvalidGeometry: いずれかの点で detJ が閾値以下
        """
        for point in self.rule.points:
            self._checked_jacobian(point)
        for point in self.node_natural:
            self._checked_jacobian(point)

    def integrate(self, field: Callable[[np.ndarray], float | np.ndarray]) -> float | np.ndarray:
        """∫ field dA = Σ w · field(ξ) · detJ(ξ).

        Args:
            field: 自然座標 (2,) を受け取りスカラーまたは配列を返す関数

        Returns:
            積分値（field の戻り値と同じ形状）

        Raises:
            InvalidGeometry: 反転・退化要素
        """
        self.check_jacobian()
        total = None
        for point, w in zip(self.rule.points, self.rule.weights):
            _, detJ = self.jacobian(point)
            term = np.asarray(field(point), dtype=float) * (w * detJ)
            total = term if total is None else total + term
        if total.ndim == 0:
            return float(total)
        return total

    def area(self) -> float:
        """要素面積."""
        return self.integrate(lambda p: 1.0)
