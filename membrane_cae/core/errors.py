"""膜要素計算の例外定義.

すべて検出箇所で同期的に送出し、内部でのリトライは行わない。
再試行・材料差し替え・メッシュ修正はアセンブラ側の方針とする。

例外階層:
  MembraneError            : 共通基底
  InvalidMaterial          : 弾性定数が定義域外（ValueError 互換）
  DimensionMismatch        : 形状関数データと要素の節点数が不一致（ValueError 互換）
  InvalidGeometry          : 退化・反転要素（detJ <= 0）（ValueError 互換）
  IncompatibleMaterial     : 物理戦略が受け付けない材料種別（TypeError 互換）
"""

from __future__ import annotations


class MembraneError(Exception):
    """membrane_cae が送出する例外の基底クラス."""


class InvalidMaterial(MembraneError, ValueError):
    """ヤング率・ポアソン比・厚み・密度が定義域外."""


class DimensionMismatch(MembraneError, ValueError):
    """配列形状または節点数の不一致."""


class InvalidGeometry(MembraneError, ValueError):
    """ヤコビアン行列式が非正（零面積または反転要素）."""


class IncompatibleMaterial(MembraneError, TypeError):
    """物理戦略が想定していない種別の材料が割り当てられた."""
