"""
Quantum circuit representation.

Provides a builder-style API that records named gate instructions and
runs them on a fresh :class:`StateVector`.

Example
-------
>>> from tiny_qsim import Circuit
>>> qc = Circuit(2).h(0).cx(0, 1)
>>> result = qc.run(shots=1000, seed=42)
>>> sorted(result.counts)
['00', '11']
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from tiny_qsim import gates as g
from tiny_qsim.errors import InvalidQubitIndex
from tiny_qsim.statevector import StateVector, _qubit_index


# ---------------------------------------------------------------------------
# Instruction: a single operation in the circuit
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Instruction:
    """A single gate operation applied to specific qubits."""
    name: str
    qubits: tuple[int, ...]
    params: tuple[float, ...] = ()

    @property
    def n_qubits(self) -> int:
        return len(self.qubits)

    def matrix(self) -> np.ndarray:
        """Get the gate matrix from the catalog."""
        return g.get_matrix(self.name, self.params)


@dataclass(frozen=True)
class CircuitInfo:
    """Summary of a circuit's size and contents."""
    num_qubits: int
    gate_count: int
    depth: int
    gates: tuple[Instruction, ...]


# ---------------------------------------------------------------------------
# Run result
# ---------------------------------------------------------------------------

@dataclass
class RunResult:
    """
    Result of running a circuit.

    Attributes
    ----------
    counts : dict[str, int]
        Measurement counts keyed by bitstring (qubit n-1 first).
    probabilities : ndarray
        Exact basis-state probabilities of the final state.
    shots : int
        Number of measurement shots.
    execution_time : float
        Wall-clock seconds spent simulating and sampling.
    info : CircuitInfo
        The circuit that produced this result.
    """

    counts: dict[str, int]
    probabilities: np.ndarray
    shots: int
    execution_time: float
    info: CircuitInfo

    def most_frequent(self) -> str:
        """Return the most frequently measured bitstring."""
        if not self.counts:
            raise ValueError("No measurement counts (shots=0)")
        return max(self.counts, key=self.counts.get)

    def probability_distribution(self) -> dict[str, float]:
        """Observed frequency of each bitstring."""
        if self.shots == 0:
            return {}
        return {state: count / self.shots for state, count in self.counts.items()}

    def entropy(self) -> float:
        """Shannon entropy of the observed distribution, in bits."""
        return float(-sum(
            p * math.log2(p) for p in self.probability_distribution().values() if p > 0
        ))

    def classical_fidelity(self) -> float:
        """
        Bhattacharyya coefficient between observed frequencies and the
        exact probabilities: sum of sqrt(p_expected * p_observed).
        """
        total = 0.0
        for state, p_obs in self.probability_distribution().items():
            index = int(state, 2) if state else 0
            total += math.sqrt(float(self.probabilities[index]) * p_obs)
        return total

    def performance_metrics(self) -> dict[str, float]:
        """Timing and size figures for this run."""
        elapsed = self.execution_time
        return {
            "execution_time": elapsed,
            "shots_per_second": self.shots / elapsed if elapsed > 0 else float("inf"),
            "classical_fidelity": self.classical_fidelity(),
            "gate_count": self.info.gate_count,
        }


# ---------------------------------------------------------------------------
# Circuit
# ---------------------------------------------------------------------------

class Circuit:
    """
    Quantum circuit with n_qubits quantum bits.

    Parameters
    ----------
    n_qubits : int
        Number of quantum bits (>= 0).
    name : str, optional
        Circuit name for display.
    """

    def __init__(self, n_qubits: int, name: str = "circuit") -> None:
        if n_qubits < 0:
            raise ValueError(f"Number of qubits must be >= 0, got {n_qubits}")
        self.n_qubits = n_qubits
        self.name = name
        self._instructions: list[Instruction] = []

    def __repr__(self) -> str:
        return f"Circuit('{self.name}', qubits={self.n_qubits}, gates={self.num_gates})"

    # -- Properties ---------------------------------------------------------

    @property
    def instructions(self) -> list[Instruction]:
        """List of instructions in the circuit."""
        return list(self._instructions)

    @property
    def depth(self) -> int:
        """Circuit depth (longest path through any qubit)."""
        if not self._instructions:
            return 0
        qubit_depth = [0] * self.n_qubits
        for inst in self._instructions:
            max_d = max(qubit_depth[q] for q in inst.qubits)
            for q in inst.qubits:
                qubit_depth[q] = max_d + 1
        return max(qubit_depth)

    @property
    def num_gates(self) -> int:
        return len(self._instructions)

    def info(self) -> CircuitInfo:
        return CircuitInfo(
            num_qubits=self.n_qubits,
            gate_count=self.num_gates,
            depth=self.depth,
            gates=tuple(self._instructions),
        )

    # -- Internal helpers ---------------------------------------------------

    def _validate_qubits(self, qubits: Sequence[int]) -> tuple[int, ...]:
        qubits = tuple(_qubit_index(q) for q in qubits)
        for q in qubits:
            if not 0 <= q < self.n_qubits:
                raise InvalidQubitIndex(
                    f"Qubit {q} out of range for {self.n_qubits}-qubit circuit"
                )
        if len(set(qubits)) != len(qubits):
            raise InvalidQubitIndex(f"Duplicate qubits in {qubits}")
        return qubits

    def _add(self, name: str, qubits: tuple[int, ...], params: tuple = ()) -> Circuit:
        """Add an instruction and return self for chaining."""
        qubits = self._validate_qubits(qubits)
        # Resolve once so bad names/params fail here rather than at run time
        g.get_matrix(name, params)
        self._instructions.append(Instruction(name=name, qubits=qubits, params=params))
        return self

    # -- Single-qubit gates -------------------------------------------------

    def i(self, qubit: int) -> Circuit:
        """Identity gate."""
        return self._add("i", (qubit,))

    def x(self, qubit: int) -> Circuit:
        """Pauli-X gate."""
        return self._add("x", (qubit,))

    def y(self, qubit: int) -> Circuit:
        """Pauli-Y gate."""
        return self._add("y", (qubit,))

    def z(self, qubit: int) -> Circuit:
        """Pauli-Z gate."""
        return self._add("z", (qubit,))

    def h(self, qubit: int) -> Circuit:
        """Hadamard gate."""
        return self._add("h", (qubit,))

    def s(self, qubit: int) -> Circuit:
        return self._add("s", (qubit,))

    def sdg(self, qubit: int) -> Circuit:
        return self._add("sdg", (qubit,))

    def t(self, qubit: int) -> Circuit:
        return self._add("t", (qubit,))

    def tdg(self, qubit: int) -> Circuit:
        return self._add("tdg", (qubit,))

    # -- Parameterized single-qubit gates -----------------------------------

    def rx(self, theta: float, qubit: int) -> Circuit:
        """Rotation around X-axis."""
        return self._add("rx", (qubit,), (theta,))

    def ry(self, theta: float, qubit: int) -> Circuit:
        """Rotation around Y-axis."""
        return self._add("ry", (qubit,), (theta,))

    def rz(self, theta: float, qubit: int) -> Circuit:
        """Rotation around Z-axis."""
        return self._add("rz", (qubit,), (theta,))

    def p(self, phi: float, qubit: int) -> Circuit:
        """Phase gate."""
        return self._add("p", (qubit,), (phi,))

    def u3(self, theta: float, phi: float, lam: float, qubit: int) -> Circuit:
        """Universal single-qubit gate (U3)."""
        return self._add("u3", (qubit,), (theta, phi, lam))

    def qft_rotation(self, k: int, qubit: int) -> Circuit:
        """Rz(2π / 2^k)."""
        return self._add("qft_rotation", (qubit,), (k,))

    # -- Multi-qubit gates --------------------------------------------------

    def cx(self, control: int, target: int) -> Circuit:
        """Controlled-NOT (CNOT) gate."""
        return self._add("cx", (control, target))

    def cnot(self, control: int, target: int) -> Circuit:
        """Alias for cx."""
        return self.cx(control, target)

    def cz(self, control: int, target: int) -> Circuit:
        """Controlled-Z gate."""
        return self._add("cz", (control, target))

    def swap(self, q0: int, q1: int) -> Circuit:
        """SWAP gate."""
        return self._add("swap", (q0, q1))

    def cp(self, phi: float, control: int, target: int) -> Circuit:
        """Controlled-Phase gate."""
        return self._add("cp", (control, target), (phi,))

    def ccx(self, control1: int, control2: int, target: int) -> Circuit:
        """Toffoli gate."""
        return self._add("ccx", (control1, control2, target))

    def toffoli(self, control1: int, control2: int, target: int) -> Circuit:
        """Alias for ccx."""
        return self.ccx(control1, control2, target)

    # -- Composite builders -------------------------------------------------

    def bell_state(self, q0: int = 0, q1: int = 1) -> Circuit:
        """(|00⟩ + |11⟩)/√2 on q0, q1."""
        return self.h(q0).cx(q0, q1)

    def ghz_state(self, qubits: Sequence[int] | None = None) -> Circuit:
        """(|0...0⟩ + |1...1⟩)/√2 across ``qubits`` (default: all)."""
        qubits = list(range(self.n_qubits)) if qubits is None else list(qubits)
        if len(qubits) < 2:
            raise ValueError("GHZ state requires at least 2 qubits")
        self.h(qubits[0])
        for q in qubits[1:]:
            self.cx(qubits[0], q)
        return self

    def qft(self, qubits: Sequence[int] | None = None) -> Circuit:
        """
        Quantum Fourier Transform on ``qubits`` (default: all), with
        ``qubits[0]`` as the most significant input bit.
        """
        qubits = list(range(self.n_qubits - 1, -1, -1)) if qubits is None else list(qubits)
        n = len(qubits)
        for i in range(n):
            self.h(qubits[i])
            for j in range(i + 1, n):
                self.cp(np.pi / 2 ** (j - i), qubits[j], qubits[i])
        for i in range(n // 2):
            self.swap(qubits[i], qubits[n - 1 - i])
        return self

    # -- Execution ----------------------------------------------------------

    def simulate(
        self, seed: int | None = None, rng: np.random.Generator | None = None
    ) -> StateVector:
        """Apply every instruction to a fresh register and return it."""
        state = StateVector(self.n_qubits, seed=seed, rng=rng)
        for inst in self._instructions:
            if inst.n_qubits == 2:
                state.apply_two_qubit_gate(inst.matrix(), inst.qubits[0], inst.qubits[1])
            else:
                state.apply_gate(inst.matrix(), inst.qubits)
        return state

    def statevector(self) -> np.ndarray:
        """Convenience: run circuit and return just the state vector."""
        return self.simulate().amplitudes

    def run(
        self,
        shots: int = 1024,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> RunResult:
        """
        Simulate the circuit and sample ``shots`` measurements of all qubits.

        Parameters
        ----------
        shots : int
            Number of measurement shots. 0 = no sampling.
        seed : int | None
            Seed for sampling.
        rng : numpy.random.Generator, optional
            Generator for sampling; takes precedence over ``seed``.
        """
        start = time.perf_counter()
        state = self.simulate(seed=seed, rng=rng)
        counts = state.measure(shots)
        elapsed = time.perf_counter() - start

        return RunResult(
            counts=counts,
            probabilities=state.get_probabilities(),
            shots=shots,
            execution_time=elapsed,
            info=self.info(),
        )
