"""要素（幾何 + 物理の合成）のテスト.

検証項目:
  - 自由度数・DOF インデックス
  - 材料の取得/再割り当て、不適合材料の即時拒否
  - 行列要求の物理戦略への委譲
  - 一定ひずみパッチテスト（ひずみ・応力の回復）
  - スレッド並列での呼び出し
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from membrane_cae.core.errors import DimensionMismatch, IncompatibleMaterial, InvalidGeometry
from membrane_cae.element import Element
from membrane_cae.geometry.quad4 import Quad4Geometry
from membrane_cae.geometry.tri3 import Tri3Geometry
from membrane_cae.geometry.tri6 import Tri6Geometry
from membrane_cae.materials.elastic import PlaneStrainElastic, PlaneStressElastic
from membrane_cae.physics.membrane import MembranePhysics, membrane_mass_matrix

E = 70e9  # アルミ
NU = 0.33
H = 0.002
RHO = 2700.0
ALU = PlaneStressElastic(E, NU, thickness=H, rho=RHO, name="aluminium")

TRI3_UNIT = np.array([[0.0, 0.0], [2.0, 0.0], [0.0, 1.0]])
QUAD4_XY = np.array([[0.0, 0.0], [2.0, 0.2], [2.3, 1.4], [-0.1, 1.1]])
PHYSICS = MembranePhysics()


def _tri3_element(material=ALU, node_ids=(4, 7, 9)) -> Element:
    return Element(Tri3Geometry(TRI3_UNIT), PHYSICS, material, node_ids=node_ids)


class TestDegreesOfFreedom:
    def test_ndof(self):
        elem = _tri3_element()
        assert elem.ndof_per_node == 2
        assert elem.nnodes == 3
        assert elem.ndof == 6

    def test_dof_indices(self):
        elem = _tri3_element()
        assert elem.dof_indices().tolist() == [8, 9, 14, 15, 18, 19]

    def test_default_node_ids(self):
        elem = Element(Quad4Geometry(QUAD4_XY), PHYSICS, ALU)
        assert elem.node_ids.tolist() == [0, 1, 2, 3]
        assert elem.dof_indices().tolist() == list(range(8))

    def test_node_ids_length_mismatch(self):
        with pytest.raises(DimensionMismatch):
            _tri3_element(node_ids=(0, 1, 2, 3))


class TestMaterialBinding:
    def test_get_material_returns_same_object(self):
        elem = _tri3_element()
        assert elem.material is ALU

    def test_shared_material(self):
        e1 = _tri3_element(node_ids=(0, 1, 2))
        e2 = _tri3_element(node_ids=(1, 3, 2))
        assert e1.material is e2.material

    def test_rebind_compatible(self):
        elem = _tri3_element()
        steel = PlaneStressElastic(210e9, 0.3, thickness=0.01, rho=7850.0)
        elem.material = steel
        assert elem.material is steel
        assert elem.mass_matrix()[0::2, 0::2].sum() == pytest.approx(78.5)

    def test_rebind_incompatible_rejected(self):
        elem = _tri3_element()
        with pytest.raises(IncompatibleMaterial):
            elem.material = PlaneStrainElastic(E, NU, thickness=H, rho=RHO)
        # 拒否後も元の材料が保持される
        assert elem.material is ALU

    @pytest.mark.parametrize("bad", [None, 1.0, {"E": E, "nu": NU}])
    def test_rebind_non_material_rejected(self, bad):
        elem = _tri3_element()
        with pytest.raises(IncompatibleMaterial):
            elem.material = bad

    def test_construct_with_incompatible_material(self):
        with pytest.raises(IncompatibleMaterial):
            _tri3_element(material=PlaneStrainElastic(E, NU))

    def test_incompatible_material_is_type_error(self):
        with pytest.raises(TypeError):
            _tri3_element(material=PlaneStrainElastic(E, NU))

    def test_repr_shows_bound_material(self):
        elem = _tri3_element()
        assert repr(ALU) in repr(elem)
        steel = PlaneStressElastic(210e9, 0.3, thickness=0.01, rho=7850.0, name="steel")
        elem.material = steel
        assert repr(steel) in repr(elem)

    def test_rebind_logged(self, caplog):
        elem = _tri3_element()
        with caplog.at_level(logging.DEBUG, logger="membrane_cae.element"):
            elem.material = PlaneStressElastic(E, 0.3, thickness=H, rho=RHO)
        assert "material rebound" in caplog.text


class TestComposition:
    def test_rejects_non_geometry(self):
        with pytest.raises(TypeError):
            Element(TRI3_UNIT, PHYSICS, ALU)

    def test_rejects_non_physics(self):
        with pytest.raises(TypeError):
            Element(Tri3Geometry(TRI3_UNIT), object(), ALU)

    @pytest.mark.parametrize(
        "geom",
        [
            Tri3Geometry(TRI3_UNIT),
            Quad4Geometry(QUAD4_XY),
            Tri6Geometry(
                [[0.0, 0.0], [2.0, 0.0], [0.5, 1.5], [1.0, 0.0], [1.25, 0.75], [0.25, 0.75]]
            ),
        ],
        ids=lambda g: type(g).__name__,
    )
    def test_delegation(self, geom):
        elem = Element(geom, PHYSICS, ALU)
        assert np.array_equal(elem.material_matrix(), ALU.tangent())
        assert np.array_equal(elem.mass_matrix(), membrane_mass_matrix(geom, ALU))
        assert np.array_equal(
            elem.mass_matrix(lumped=True), membrane_mass_matrix(geom, ALU, lumped=True)
        )
        K = elem.stiffness_matrix()
        assert K.shape == (elem.ndof, elem.ndof)

    def test_strain_displacement_matrix(self):
        elem = _tri3_element()
        dN = elem.geometry.shape_derivatives(np.array([0.3, 0.3]))
        B = elem.strain_displacement_matrix(dN)
        assert B.shape == (3, 6)
        assert np.array_equal(B, elem.strain_displacement_matrix_at(np.array([0.3, 0.3])))

    def test_strain_displacement_matrix_wrong_node_count(self):
        elem = _tri3_element()
        with pytest.raises(DimensionMismatch):
            elem.strain_displacement_matrix(np.zeros((4, 2)))

    def test_inverted_geometry_propagates(self):
        elem = Element(Tri3Geometry(TRI3_UNIT[[0, 2, 1]]), PHYSICS, ALU)
        with pytest.raises(InvalidGeometry):
            elem.mass_matrix()
        with pytest.raises(InvalidGeometry):
            elem.stiffness_matrix()


class TestPatch:
    """一定ひずみ場のパッチテスト（歪んだ Q4）."""

    A = np.array([1e-4, 2e-3, -5e-4])  # u = a0 + a1 x + a2 y
    B = np.array([-3e-4, 7e-4, -1e-3])  # v = b0 + b1 x + b2 y

    def _displacement(self, coords: np.ndarray) -> np.ndarray:
        x, y = coords[:, 0], coords[:, 1]
        u = self.A[0] + self.A[1] * x + self.A[2] * y
        v = self.B[0] + self.B[1] * x + self.B[2] * y
        return np.column_stack([u, v]).ravel()

    def test_constant_strain_recovered(self):
        elem = Element(Quad4Geometry(QUAD4_XY), PHYSICS, ALU)
        u = self._displacement(elem.geometry.coords)
        expected = np.array([self.A[1], self.B[2], self.A[2] + self.B[1]])
        for p in [np.array([0.0, 0.0]), np.array([0.5, -0.7]), np.array([-0.9, 0.9])]:
            assert np.allclose(elem.strain(u, p), expected, atol=1e-15)
            assert np.allclose(elem.stress(u, p), ALU.tangent() @ expected, rtol=1e-12)

    def test_internal_force_of_rigid_motion_vanishes(self):
        elem = Element(Quad4Geometry(QUAD4_XY), PHYSICS, ALU)
        u = np.tile([0.3, -0.2], 4)
        f = elem.stiffness_matrix() @ u
        assert np.allclose(f, 0.0, atol=1e-9 * np.abs(elem.stiffness_matrix()).max())

    def test_wrong_displacement_length(self):
        elem = _tri3_element()
        with pytest.raises(DimensionMismatch):
            elem.strain(np.zeros(8), np.array([0.2, 0.2]))


class TestConcurrency:
    def test_parallel_calls_match_serial(self):
        """純関数なので複数スレッドから同時に呼んでも結果は逐次と一致する."""
        rng = np.random.default_rng(0)
        elems = []
        for _ in range(16):
            xy = QUAD4_XY + 0.05 * rng.standard_normal((4, 2))
            elems.append(Element(Quad4Geometry(xy), PHYSICS, ALU))

        serial = [(e.mass_matrix(), e.stiffness_matrix()) for e in elems]
        with ThreadPoolExecutor(max_workers=4) as pool:
            parallel = list(pool.map(lambda e: (e.mass_matrix(), e.stiffness_matrix()), elems))

        for (M_s, K_s), (M_p, K_p) in zip(serial, parallel):
            assert np.array_equal(M_s, M_p)
            assert np.array_equal(K_s, K_p)
