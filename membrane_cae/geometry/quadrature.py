"""数値積分則（自然座標系）.

三角形: 参照三角形 {ξ>=0, η>=0, ξ+η<=1}（面積 1/2）。重みの総和 = 1/2。
四角形: 参照正方形 [-1,1]×[-1,1]（面積 4）。重みの総和 = 4。

参考文献:
  - Dunavant, D.A. (1985) "High degree efficient symmetrical Gaussian
    quadrature rules for the triangle", IJNME 21, 1129-1148.
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np


class QuadRule(NamedTuple):
    """積分則.

    Attributes:
        points: (npts, 2) 自然座標 (ξ, η)
        weights: (npts,) 重み
    """

    points: np.ndarray
    weights: np.ndarray


# ============================================================
# 三角形
# ============================================================


def triangle_rule(npts: int) -> QuadRule:
    """参照三角形上の対称積分則.

    Args:
        npts: 積分点数。1（1次精度）, 3（2次精度）, 6（4次精度）。

    Returns:
        QuadRule
    """
    if npts == 1:
        pts = np.array([[1.0 / 3.0, 1.0 / 3.0]])
        w = np.array([0.5])
    elif npts == 3:
        a, b = 1.0 / 6.0, 2.0 / 3.0
        pts = np.array([[a, a], [b, a], [a, b]])
        w = np.full(3, 1.0 / 6.0)
    elif npts == 6:
        # Dunavant 次数4（重みは面積1基準 → 1/2 倍）
        a1, w1 = 0.445948490915965, 0.223381589678011
        a2, w2 = 0.091576213509771, 0.109951743655322
        pts = np.array(
            [
                [a1, a1],
                [1.0 - 2.0 * a1, a1],
                [a1, 1.0 - 2.0 * a1],
                [a2, a2],
                [1.0 - 2.0 * a2, a2],
                [a2, 1.0 - 2.0 * a2],
            ]
        )
        w = 0.5 * np.array([w1, w1, w1, w2, w2, w2])
    else:
        raise ValueError(f"三角形の積分点数は 1, 3, 6 のいずれか: {npts}")
    return QuadRule(pts, w)


# ============================================================
# 四角形（テンソル積 Gauss-Legendre）
# ============================================================


def gauss_rule(n: int) -> QuadRule:
    """参照正方形上の n×n Gauss 則.

    Args:
        n: 1方向あたりの積分点数 (1, 2, 3)

    Returns:
        QuadRule（ξ が速く変化する順）
    """
    if n not in (1, 2, 3):
        raise ValueError(f"Gauss 則の点数は 1, 2, 3 のいずれか: {n}")
    x, w = np.polynomial.legendre.leggauss(n)
    XI, ETA = np.meshgrid(x, x, indexing="xy")
    W = np.outer(w, w)
    return QuadRule(np.column_stack([XI.ravel(), ETA.ravel()]), W.ravel())
