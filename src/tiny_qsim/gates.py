"""
Quantum gate catalog.

All gates are unitary matrices (numpy arrays), except the measurement
projectors returned by :func:`measurement_z`. Fixed gates are read-only
module constants; parameterized gates are functions returning a new matrix.

Basis ordering for multi-qubit gates: the first qubit a gate is applied to
is the most significant bit of the row/column index. For two-qubit gates
that is ``index = control * 2 + target``.

Gate categories:
    - Single-qubit: I, X, Y, Z, H, S, T, Sdg, Tdg
    - Rotations: Rx, Ry, Rz, P (phase), U3 (universal), qft_rotation
    - Two-qubit: CNOT/CX, CZ, SWAP, CP (controlled phase)
    - Three-qubit: CCX (Toffoli)
"""

from __future__ import annotations

import numpy as np
from numpy import ndarray

from tiny_qsim.errors import UnknownGate

# Type alias
Matrix = ndarray

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / np.sqrt(2.0)


def _frozen(m: Matrix) -> Matrix:
    m.flags.writeable = False
    return m


# ---------------------------------------------------------------------------
# Single-qubit fixed gates
# ---------------------------------------------------------------------------

I = _frozen(np.eye(2, dtype=np.complex128))
"""Identity gate."""

X = _frozen(np.array([[0, 1], [1, 0]], dtype=np.complex128))
"""Pauli-X (NOT) gate."""

Y = _frozen(np.array([[0, -1j], [1j, 0]], dtype=np.complex128))
"""Pauli-Y gate."""

Z = _frozen(np.array([[1, 0], [0, -1]], dtype=np.complex128))
"""Pauli-Z gate."""

H = _frozen(np.array([[1, 1], [1, -1]], dtype=np.complex128) * _SQRT2_INV)
"""Hadamard gate."""

S = _frozen(np.array([[1, 0], [0, 1j]], dtype=np.complex128))
"""S (phase) gate: sqrt(Z)."""

Sdg = _frozen(np.array([[1, 0], [0, -1j]], dtype=np.complex128))
"""S-dagger gate."""

T = _frozen(np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128))
"""T gate: sqrt(S)."""

Tdg = _frozen(np.array([[1, 0], [0, np.exp(-1j * np.pi / 4)]], dtype=np.complex128))
"""T-dagger gate."""

# ---------------------------------------------------------------------------
# Single-qubit parameterized gates
# ---------------------------------------------------------------------------

def P(phi: float) -> Matrix:
    """Phase gate: diagonal with entries [1, exp(i*phi)]."""
    return np.array([[1, 0], [0, np.exp(1j * phi)]], dtype=np.complex128)


phase = P


def Rx(theta: float) -> Matrix:
    """Rotation around X-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array([[c, -1j * s], [-1j * s, c]], dtype=np.complex128)


def Ry(theta: float) -> Matrix:
    """Rotation around Y-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array([[c, -s], [s, c]], dtype=np.complex128)


def Rz(theta: float) -> Matrix:
    """Rotation around Z-axis by angle theta."""
    return np.array(
        [[np.exp(-1j * theta / 2), 0], [0, np.exp(1j * theta / 2)]],
        dtype=np.complex128,
    )


def U3(theta: float, phi: float, lam: float) -> Matrix:
    """
    Universal single-qubit gate (IBM U3 convention).

    U3(θ, φ, λ) = [[cos(θ/2), -e^(iλ) sin(θ/2)],
                    [e^(iφ) sin(θ/2), e^(i(φ+λ)) cos(θ/2)]]

    Every single-qubit gate in this module equals some U3 up to a global
    phase, e.g. U3(π, 0, π) = X and U3(π/2, 0, π) = H.
    """
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array(
        [
            [c, -np.exp(1j * lam) * s],
            [np.exp(1j * phi) * s, np.exp(1j * (phi + lam)) * c],
        ],
        dtype=np.complex128,
    )


def qft_rotation(k: int) -> Matrix:
    """Rz(2π / 2^k), the k-th rotation of a Quantum Fourier Transform."""
    return Rz(2 * np.pi / (1 << int(k)))


def measurement_z(outcome: bool | int) -> Matrix:
    """
    Projector onto |1⟩ if ``outcome`` is truthy, else onto |0⟩.

    Not unitary: applying it discards amplitude, so the register must be
    renormalized afterwards.
    """
    if outcome:
        return np.array([[0, 0], [0, 1]], dtype=np.complex128)
    return np.array([[1, 0], [0, 0]], dtype=np.complex128)


# ---------------------------------------------------------------------------
# Two-qubit gates (4x4 matrices, index = control * 2 + target)
# ---------------------------------------------------------------------------

CNOT = _frozen(np.array(
    [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]],
    dtype=np.complex128,
))
"""Controlled-NOT (CX) gate."""
CX = CNOT  # alias

CZ = _frozen(np.diag([1, 1, 1, -1]).astype(np.complex128))
"""Controlled-Z gate."""

SWAP = _frozen(np.array(
    [[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]],
    dtype=np.complex128,
))
"""SWAP gate."""


def CP(phi: float) -> Matrix:
    """Controlled-Phase gate: CZ with exp(i*phi) in place of -1."""
    return np.diag([1, 1, 1, np.exp(1j * phi)]).astype(np.complex128)


controlled_phase = CP

# ---------------------------------------------------------------------------
# Three-qubit gates (8x8 matrices)
# ---------------------------------------------------------------------------

_ccx = np.eye(8, dtype=np.complex128)
_ccx[6, 6] = 0
_ccx[7, 7] = 0
_ccx[6, 7] = 1
_ccx[7, 6] = 1
CCX = _frozen(_ccx)
"""Toffoli (CCX) gate: flips the last qubit when the first two are 1."""
TOFFOLI = CCX  # alias
del _ccx


# ---------------------------------------------------------------------------
# Gate metadata registry
# ---------------------------------------------------------------------------

GATE_REGISTRY: dict[str, dict] = {
    # Fixed single-qubit
    "i": {"matrix": I, "n_qubits": 1, "n_params": 0},
    "x": {"matrix": X, "n_qubits": 1, "n_params": 0},
    "y": {"matrix": Y, "n_qubits": 1, "n_params": 0},
    "z": {"matrix": Z, "n_qubits": 1, "n_params": 0},
    "h": {"matrix": H, "n_qubits": 1, "n_params": 0},
    "s": {"matrix": S, "n_qubits": 1, "n_params": 0},
    "sdg": {"matrix": Sdg, "n_qubits": 1, "n_params": 0},
    "t": {"matrix": T, "n_qubits": 1, "n_params": 0},
    "tdg": {"matrix": Tdg, "n_qubits": 1, "n_params": 0},
    # Parameterized single-qubit
    "rx": {"factory": Rx, "n_qubits": 1, "n_params": 1},
    "ry": {"factory": Ry, "n_qubits": 1, "n_params": 1},
    "rz": {"factory": Rz, "n_qubits": 1, "n_params": 1},
    "p": {"factory": P, "n_qubits": 1, "n_params": 1},
    "phase": {"factory": P, "n_qubits": 1, "n_params": 1},
    "u3": {"factory": U3, "n_qubits": 1, "n_params": 3},
    "qft_rotation": {"factory": qft_rotation, "n_qubits": 1, "n_params": 1},
    # Fixed two-qubit
    "cx": {"matrix": CNOT, "n_qubits": 2, "n_params": 0},
    "cnot": {"matrix": CNOT, "n_qubits": 2, "n_params": 0},
    "cz": {"matrix": CZ, "n_qubits": 2, "n_params": 0},
    "swap": {"matrix": SWAP, "n_qubits": 2, "n_params": 0},
    # Parameterized two-qubit
    "cp": {"factory": CP, "n_qubits": 2, "n_params": 1},
    # Three-qubit
    "ccx": {"matrix": CCX, "n_qubits": 3, "n_params": 0},
    "toffoli": {"matrix": CCX, "n_qubits": 3, "n_params": 0},
}


def _lookup(name: str) -> dict:
    key = name.lower()
    if key not in GATE_REGISTRY:
        raise UnknownGate(f"Unknown gate: '{name}'. Available: {sorted(GATE_REGISTRY)}")
    return GATE_REGISTRY[key]


def get_matrix(name: str, params: tuple[float, ...] = ()) -> Matrix:
    """
    Look up a gate matrix by name, with optional parameters.

    Parameters
    ----------
    name : str
        Gate name (case-insensitive).
    params : tuple of float
        Parameters for parameterized gates.

    Returns
    -------
    numpy.ndarray
        Square matrix for the gate. Fixed gates are returned read-only.

    Raises
    ------
    UnknownGate
        If the gate name is not found or the wrong number of parameters
        is provided.
    """
    info = _lookup(name)
    n_params = info["n_params"]
    params = tuple(params)

    if len(params) != n_params:
        raise UnknownGate(
            f"Gate '{name}' requires {n_params} parameter(s), got {len(params)}"
        )
    if n_params == 0:
        return info["matrix"]
    return info["factory"](*params)


def num_qubits(name: str) -> int:
    """Number of qubits the named gate acts on."""
    return _lookup(name)["n_qubits"]


def dagger(m: Matrix) -> Matrix:
    """Conjugate transpose."""
    return np.asarray(m).conj().T


def is_unitary(m: Matrix, tol: float = 1e-10) -> bool:
    """Check if a matrix is unitary: U†U = I"""
    m = np.asarray(m)
    product = m.conj().T @ m
    return np.allclose(product, np.eye(m.shape[0]), atol=tol)
