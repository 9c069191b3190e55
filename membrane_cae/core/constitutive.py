"""構成則（材料モデル）の抽象インタフェース定義.

Protocol 定義:
  ConstitutiveProtocol    : 線形弾性用（tangent のみ）。
  MembraneMaterialProtocol : 膜要素が参照する材料記述子（E, nu, 厚み, 密度 + tangent）。

材料記述子は不変（frozen）で、複数要素から参照共有される。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class ConstitutiveProtocol(Protocol):
    """構成則の共通インタフェース.

    線形弾性の場合: tangent() は定数テンソル D を返す。応力は sigma = D @ strain。

    適合クラス例:
      - PlaneStressElastic     (3,3)
      - PlaneStrainElastic     (3,3)
    """

    def tangent(self, strain: np.ndarray | None = None) -> np.ndarray:
        """弾性剛性テンソルを返す.

        Args:
            strain: ひずみベクトル。線形弾性の場合は不要（None可）。

        Returns:
            D: (3, 3) 弾性テンソル
        """
        ...


@runtime_checkable
class MembraneMaterialProtocol(ConstitutiveProtocol, Protocol):
    """膜要素の物理計算が参照する材料記述子.

    Attributes:
        E: ヤング率
        nu: ポアソン比
        thickness: 板厚 h
        rho: 密度 ρ
    """

    E: float
    nu: float
    thickness: float
    rho: float
