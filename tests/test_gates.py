"""Tests for the gate catalog."""

import numpy as np
import pytest
from scipy.linalg import expm

from tiny_qsim import gates as g
from tiny_qsim.errors import UnknownGate


# ---------------------------------------------------------------------------
# Unitarity tests: every gate must satisfy U†U = I
# ---------------------------------------------------------------------------

FIXED_GATES = [
    ("I", g.I), ("X", g.X), ("Y", g.Y), ("Z", g.Z), ("H", g.H),
    ("S", g.S), ("Sdg", g.Sdg), ("T", g.T), ("Tdg", g.Tdg),
    ("CNOT", g.CNOT), ("CZ", g.CZ), ("SWAP", g.SWAP), ("CCX", g.CCX),
]


@pytest.mark.parametrize("name,matrix", FIXED_GATES)
def test_fixed_gate_unitary(name, matrix):
    """Every fixed gate must be unitary: U†U = I."""
    dim = matrix.shape[0]
    product = matrix.conj().T @ matrix
    np.testing.assert_allclose(product, np.eye(dim), atol=1e-12, err_msg=f"{name} is not unitary")
    assert g.is_unitary(matrix)


@pytest.mark.parametrize("name,matrix", FIXED_GATES)
def test_fixed_gate_shape(name, matrix):
    """Gates must be square matrices of dimension 2^k."""
    assert matrix.shape[0] == matrix.shape[1]
    dim = matrix.shape[0]
    assert dim & (dim - 1) == 0, f"{name} dimension {dim} is not a power of 2"


@pytest.mark.parametrize("name,matrix", FIXED_GATES)
def test_fixed_gates_are_read_only(name, matrix):
    with pytest.raises(ValueError):
        matrix[0, 0] = 5


PARAM_GATES_1 = [
    ("Rx", g.Rx), ("Ry", g.Ry), ("Rz", g.Rz), ("P", g.P),
]


@pytest.mark.parametrize("name,factory", PARAM_GATES_1)
@pytest.mark.parametrize("theta", [0, 0.5, np.pi, 2 * np.pi, -1.3])
def test_param_gate_unitary(name, factory, theta):
    """Parameterized single-param gates must be unitary for all angles."""
    mat = factory(theta)
    product = mat.conj().T @ mat
    np.testing.assert_allclose(product, np.eye(2), atol=1e-12)


@pytest.mark.parametrize("theta", [0, 0.7, np.pi, -0.3])
def test_u3_unitary(theta):
    mat = g.U3(theta, 0.5, -0.2)
    product = mat.conj().T @ mat
    np.testing.assert_allclose(product, np.eye(2), atol=1e-12)


@pytest.mark.parametrize("phi", [0, np.pi / 4, np.pi, -0.5, 12.0])
def test_controlled_phase_unitary(phi):
    assert g.is_unitary(g.CP(phi))


# ---------------------------------------------------------------------------
# Gate algebra tests
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("matrix", [g.X, g.Y, g.Z, g.H, g.CNOT, g.CZ, g.SWAP, g.CCX])
def test_self_inverse(matrix):
    np.testing.assert_allclose(matrix @ matrix, np.eye(matrix.shape[0]), atol=1e-12)


def test_s_squared_is_z():
    np.testing.assert_allclose(g.S @ g.S, g.Z, atol=1e-12)


def test_t_squared_is_s():
    np.testing.assert_allclose(g.T @ g.T, g.S, atol=1e-12)


def test_dagger_of_s_and_t():
    np.testing.assert_allclose(g.dagger(g.S), g.Sdg, atol=1e-12)
    np.testing.assert_allclose(g.dagger(g.T), g.Tdg, atol=1e-12)


def test_controlled_phase_zero_is_identity():
    np.testing.assert_allclose(g.controlled_phase(0.0), np.eye(4), atol=1e-12)


def test_controlled_phase_pi_is_cz():
    np.testing.assert_allclose(g.CP(np.pi), g.CZ, atol=1e-12)


def test_phase_pi_over_2_is_s():
    np.testing.assert_allclose(g.phase(np.pi / 2), g.S, atol=1e-12)


@pytest.mark.parametrize("theta", [0.0, 0.3, np.pi, -2.1])
def test_rotations_match_matrix_exponential(theta):
    """R_P(θ) = exp(-iθP/2)."""
    np.testing.assert_allclose(g.Rx(theta), expm(-0.5j * theta * g.X), atol=1e-12)
    np.testing.assert_allclose(g.Ry(theta), expm(-0.5j * theta * g.Y), atol=1e-12)
    np.testing.assert_allclose(g.Rz(theta), expm(-0.5j * theta * g.Z), atol=1e-12)


def test_u3_special_cases():
    np.testing.assert_allclose(g.U3(np.pi, 0, np.pi), g.X, atol=1e-12)
    np.testing.assert_allclose(g.U3(np.pi / 2, 0, np.pi), g.H, atol=1e-12)
    np.testing.assert_allclose(g.U3(0, 0, 0.8), g.P(0.8), atol=1e-12)


@pytest.mark.parametrize("k", [1, 2, 3, 5])
def test_qft_rotation(k):
    np.testing.assert_allclose(g.qft_rotation(k), g.Rz(2 * np.pi / 2 ** k), atol=1e-12)


def test_measurement_projectors():
    p0, p1 = g.measurement_z(False), g.measurement_z(True)
    np.testing.assert_allclose(p0 + p1, np.eye(2), atol=1e-12)
    np.testing.assert_allclose(p0 @ p0, p0, atol=1e-12)
    np.testing.assert_allclose(p1 @ p1, p1, atol=1e-12)
    assert not g.is_unitary(p0)


def test_cnot_basis_ordering():
    """Index = control*2 + target: |10⟩ ↔ |11⟩."""
    e = np.eye(4)
    np.testing.assert_allclose(g.CNOT @ e[2], e[3])
    np.testing.assert_allclose(g.CNOT @ e[1], e[1])


def test_toffoli_flips_only_when_both_controls_set():
    e = np.eye(8)
    np.testing.assert_allclose(g.CCX @ e[6], e[7])
    np.testing.assert_allclose(g.CCX @ e[7], e[6])
    for i in range(6):
        np.testing.assert_allclose(g.CCX @ e[i], e[i])


# ---------------------------------------------------------------------------
# Registry lookup
# ---------------------------------------------------------------------------

def test_get_matrix_fixed_case_insensitive():
    assert g.get_matrix("H") is g.H
    assert g.get_matrix("cNoT") is g.CNOT
    assert g.get_matrix("Toffoli") is g.CCX


def test_get_matrix_parameterized():
    np.testing.assert_allclose(g.get_matrix("RX", (0.3,)), g.Rx(0.3))
    np.testing.assert_allclose(g.get_matrix("u3", (0.1, 0.2, 0.3)), g.U3(0.1, 0.2, 0.3))


@pytest.mark.parametrize("name,params", [
    ("NOPE", ()),
    ("RX", ()),
    ("RX", (0.1, 0.2)),
    ("H", (0.5,)),
])
def test_get_matrix_rejects(name, params):
    with pytest.raises(UnknownGate):
        g.get_matrix(name, params)


def test_num_qubits():
    assert g.num_qubits("h") == 1
    assert g.num_qubits("CX") == 2
    assert g.num_qubits("ccx") == 3
    with pytest.raises(UnknownGate):
        g.num_qubits("foo")


@pytest.mark.parametrize("name", sorted(g.GATE_REGISTRY))
def test_registry_entries_consistent(name):
    info = g.GATE_REGISTRY[name]
    params = (0.4,) * info["n_params"]
    mat = g.get_matrix(name, params)
    assert mat.shape == (2 ** info["n_qubits"],) * 2
    assert g.is_unitary(mat)
