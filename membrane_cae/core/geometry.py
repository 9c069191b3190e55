"""幾何プロバイダの抽象インタフェース定義.

物理計算（B, D, M）は節点座標や積分則を直接扱わず、本 Protocol を介して
形状関数値・全体座標微分・要素領域上の積分を受け取る。
積分則の選択とヤコビアン変換は幾何プロバイダ側の責務。
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class GeometryProtocol(Protocol):
    """2D 要素幾何の共通インタフェース.

    Attributes:
        nnodes: 要素の節点数（TRI3=3, Q4=4, TRI6=6, etc.）
        coords: (nnodes, 2) 節点座標

    適合クラス例:
      - Tri3Geometry, Tri6Geometry, Quad4Geometry
    """

    nnodes: int
    coords: np.ndarray

    def shape_functions(self, point: np.ndarray) -> np.ndarray:
        """自然座標 point における形状関数値 (nnodes,) を返す."""
        ...

    def shape_derivatives(self, point: np.ndarray) -> np.ndarray:
        """自然座標 point における全体座標微分 (nnodes, 2) を返す.

        列は [dN/dx, dN/dy]。
        """
        ...

    def integrate(self, field: Callable[[np.ndarray], float | np.ndarray]) -> float | np.ndarray:
        """スカラー場または行列場を要素領域上で積分する.

        Args:
            field: 自然座標 point を受け取り、スカラーまたは配列を返す関数

        Returns:
            ∫ field dA（field の戻り値と同じ形状）
        """
        ...
