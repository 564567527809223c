"""
tiny-qsim: A minimal state-vector quantum circuit simulator.

An n-qubit register is held as 2^n complex amplitudes. Gates from the
catalog are contracted into it in place, measurements are sampled from
its probability distribution, and registers are compared by fidelity.

Quick Start:
    >>> from tiny_qsim import StateVector, gates
    >>> sv = StateVector(2, seed=42)
    >>> sv.apply_single_qubit_gate(gates.H, 0)
    >>> sv.apply_two_qubit_gate(gates.CNOT, 0, 1)
    >>> sorted(sv.measure(1000))  # {'00': ~500, '11': ~500}
    ['00', '11']

Circuits:
    >>> from tiny_qsim import Circuit
    >>> result = Circuit(3).ghz_state().run(shots=1000, seed=1)
"""
__version__ = "0.1.0"

from . import gates
from .errors import TinyQsimError, InvalidQubitIndex, UnknownGate, InstanceNotFound
from .statevector import StateVector
from .registry import SimulatorRegistry, Handle
from .circuit import Circuit, Instruction, CircuitInfo, RunResult
from .visualization import show_counts, show_probabilities, plot_counts

__all__ = [
    # Core
    'gates',
    'StateVector',
    # Errors
    'TinyQsimError',
    'InvalidQubitIndex',
    'UnknownGate',
    'InstanceNotFound',
    # Host surface
    'SimulatorRegistry',
    'Handle',
    # Circuits
    'Circuit',
    'Instruction',
    'CircuitInfo',
    'RunResult',
    # Visualization
    'show_counts',
    'show_probabilities',
    'plot_counts',
]
