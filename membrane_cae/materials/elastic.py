"""線形弾性材料記述子.

平面応力（膜要素用）と平面ひずみの 2 種類。どちらも frozen dataclass で、
生成後は変更できない。複数の要素から同じインスタンスを参照共有してよい。

平面応力:
  D = E/(1−ν²) · [[1, ν, 0], [ν, 1, 0], [0, 0, (1−ν)/2]]

平面ひずみ:
  D = [[λ+2μ, λ, 0], [λ, λ+2μ, 0], [0, 0, μ]]
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from membrane_cae.core.errors import InvalidMaterial


def _check_finite(**values: float) -> None:
    for key, val in values.items():
        if not math.isfinite(val):
            raise InvalidMaterial(f"{key} は有限値でなければなりません: {val}")


def constitutive_plane_stress(E: float, nu: float) -> np.ndarray:
    """平面応力の弾性マトリクス D を返す。

    Args:
        E: ヤング率
        nu: ポアソン比

    Returns:
        D: (3,3) 弾性マトリクス

    Raises:
        InvalidMaterial: E <= 0、または |nu| >= 1（1−ν² が零以下で特異）
    """
    _check_finite(E=E, nu=nu)
    if E <= 0.0:
        raise InvalidMaterial(f"ヤング率 E は正値でなければなりません: {E}")
    if not -1.0 < nu < 1.0:
        raise InvalidMaterial(f"ポアソン比 nu が特異点（|nu|>=1）: {nu}")
    c = E / (1.0 - nu * nu)
    return np.array(
        [[c, c * nu, 0.0], [c * nu, c, 0.0], [0.0, 0.0, c * (1.0 - nu) / 2.0]],
        dtype=float,
    )


def constitutive_plane_strain(E: float, nu: float) -> np.ndarray:
    """平面歪みの弾性マトリクス D を返す。

    Args:
        E: ヤング率
        nu: ポアソン比

    Returns:
        D: (3,3) 弾性マトリクス

    Raises:
        InvalidMaterial: E <= 0、または nu が (-1, 0.5) の外
    """
    _check_finite(E=E, nu=nu)
    if E <= 0.0:
        raise InvalidMaterial(f"ヤング率 E は正値でなければなりません: {E}")
    if not -1.0 < nu < 0.5:
        raise InvalidMaterial(f"平面ひずみのポアソン比は (-1, 0.5): {nu}")
    lam = E * nu / ((1.0 + nu) * (1.0 - 2.0 * nu))
    mu = E / (2.0 * (1.0 + nu))
    return np.array(
        [[lam + 2.0 * mu, lam, 0.0], [lam, lam + 2.0 * mu, 0.0], [0.0, 0.0, mu]],
        dtype=float,
    )


def _validate_descriptor(E: float, nu: float, thickness: float, rho: float) -> None:
    _check_finite(E=E, nu=nu, thickness=thickness, rho=rho)
    if E <= 0.0:
        raise InvalidMaterial(f"ヤング率 E は正値でなければなりません: {E}")
    if not -1.0 < nu < 0.5:
        raise InvalidMaterial(f"ポアソン比 nu は (-1, 0.5) でなければなりません: {nu}")
    if thickness <= 0.0:
        raise InvalidMaterial(f"厚み thickness は正値でなければなりません: {thickness}")
    if rho < 0.0:
        raise InvalidMaterial(f"密度 rho は非負でなければなりません: {rho}")


@dataclass(frozen=True)
class PlaneStressElastic:
    """平面応力線形弾性材料（MembraneMaterialProtocol適合）.

    膜要素（MembranePhysics）が受け付ける唯一の材料種別。

    Attributes:
        E: ヤング率
        nu: ポアソン比 (-1 < nu < 0.5)
        thickness: 板厚 h
        rho: 密度 ρ
        name: 材料名（表示用）
    """

    E: float
    nu: float
    thickness: float = 1.0
    rho: float = 0.0
    name: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        _validate_descriptor(self.E, self.nu, self.thickness, self.rho)

    @property
    def G(self) -> float:
        """せん断弾性率."""
        return self.E / (2.0 * (1.0 + self.nu))

    @property
    def mass_per_area(self) -> float:
        """面密度 ρh."""
        return self.rho * self.thickness

    def tangent(self, strain: np.ndarray | None = None) -> np.ndarray:
        """弾性テンソル D を返す（線形なのでstrainに依存しない）."""
        return constitutive_plane_stress(self.E, self.nu)


@dataclass(frozen=True)
class PlaneStrainElastic:
    """平面ひずみ線形弾性材料（ConstitutiveProtocol適合）.

    膜要素には割り当てられない（IncompatibleMaterial）。

    Attributes:
        E: ヤング率
        nu: ポアソン比 (-1 < nu < 0.5)
        thickness: 奥行き厚み
        rho: 密度 ρ
        name: 材料名（表示用）
    """

    E: float
    nu: float
    thickness: float = 1.0
    rho: float = 0.0
    name: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        _validate_descriptor(self.E, self.nu, self.thickness, self.rho)

    def tangent(self, strain: np.ndarray | None = None) -> np.ndarray:
        """弾性テンソル D を返す."""
        return constitutive_plane_strain(self.E, self.nu)
