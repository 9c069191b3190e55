"""数値積分の設定.

幾何プロバイダが使う積分則の次数とヤコビアン判定の閾値をまとめる。
order=None の場合は各要素族の既定則（質量行列を厳密に積分できる最小次数）を使う。

  TRI3 : 3点則（2次精度）
  TRI6 : 6点則（4次精度）
  Q4   : 2×2 Gauss
"""

from __future__ import annotations

from dataclasses import dataclass

TRIANGLE_ORDERS = (1, 3, 6)
QUAD_ORDERS = (1, 2, 3)


@dataclass(frozen=True)
class IntegrationConfig:
    """積分設定.

    Attributes:
        order: 積分点数の指定。三角形は総点数 (1, 3, 6)、四角形は1方向あたりの点数 (1, 2, 3)。
            None で要素族の既定値。
        det_j_tol: detJ がこの値以下なら InvalidGeometry とする閾値
    """

    order: int | None = None
    det_j_tol: float = 0.0

    def __post_init__(self) -> None:
        if self.order is not None and self.order not in (*TRIANGLE_ORDERS, *QUAD_ORDERS):
            raise ValueError(
                f"order は {sorted({*TRIANGLE_ORDERS, *QUAD_ORDERS})} のいずれか: {self.order}"
            )
        if self.det_j_tol < 0.0:
            raise ValueError(f"det_j_tol は非負でなければなりません: {self.det_j_tol}")


DEFAULT_INTEGRATION = IntegrationConfig()
