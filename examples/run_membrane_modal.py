#!/usr/bin/env python3
"""膜要素サンプル: 片側固定の正方形薄板の面内固有振動.

要素行列（K, M）は membrane_cae で計算し、全体行列の組み立てと
固有値解析はこのスクリプト側（外部アセンブラ相当）で行う。

Usage:
    python examples/run_membrane_modal.py          # 4×4 分割
    python examples/run_membrane_modal.py 8        # 8×8 分割
"""

from __future__ import annotations

import sys

import numpy as np
from scipy.linalg import eigh

from membrane_cae.element import Element
from membrane_cae.geometry.quad4 import Quad4Geometry
from membrane_cae.materials.elastic import PlaneStressElastic
from membrane_cae.physics.membrane import MembranePhysics


def build_square_mesh(n: int, size: float = 1.0) -> tuple[np.ndarray, np.ndarray]:
    """n×n 分割の正方形 Q4 メッシュ."""
    s = np.linspace(0.0, size, n + 1)
    X, Y = np.meshgrid(s, s, indexing="xy")
    nodes = np.column_stack([X.ravel(), Y.ravel()])
    conn = []
    for j in range(n):
        for i in range(n):
            n0 = j * (n + 1) + i
            conn.append([n0, n0 + 1, n0 + n + 2, n0 + n + 1])
    return nodes, np.array(conn, dtype=int)


def run_square_plate(n: int = 4) -> np.ndarray:
    """左辺固定の鋼板（1m × 1m × 10mm）の面内固有振動数 [Hz] を返す."""
    steel = PlaneStressElastic(210e9, 0.3, thickness=0.01, rho=7850.0, name="steel")
    physics = MembranePhysics()
    nodes, conn = build_square_mesh(n)

    ndof = 2 * len(nodes)
    K = np.zeros((ndof, ndof))
    M = np.zeros((ndof, ndof))
    for elem_nodes in conn:
        elem = Element(Quad4Geometry(nodes[elem_nodes]), physics, steel, node_ids=elem_nodes)
        edofs = elem.dof_indices()
        K[np.ix_(edofs, edofs)] += elem.stiffness_matrix()
        M[np.ix_(edofs, edofs)] += elem.mass_matrix()

    fixed_nodes = np.where(np.isclose(nodes[:, 0], 0.0))[0]
    fixed = np.concatenate([2 * fixed_nodes, 2 * fixed_nodes + 1])
    free = np.setdiff1d(np.arange(ndof), fixed)

    omega2 = eigh(K[np.ix_(free, free)], M[np.ix_(free, free)], eigvals_only=True)
    return np.sqrt(np.abs(omega2[:6])) / (2.0 * np.pi)


if __name__ == "__main__":
    n = int(sys.argv[1]) if len(sys.argv) > 1 else 4
    print("=" * 60)
    print(f"正方形薄板の面内固有振動（Q4 膜要素, {n}×{n} 分割）")
    print("=" * 60)
    total_mass = 7850.0 * 0.01 * 1.0
    print(f"  総質量 ρhA = {total_mass:.3f} kg")
    for k, f in enumerate(run_square_plate(n), start=1):
        print(f"  mode {k}: {f:10.2f} Hz")
