"""
Handle table for hosting many registers behind opaque handles.

The simulation core never sees this module: a :class:`StateVector` is a
plain object owned by whoever created it. ``SimulatorRegistry`` is the
owner when a host process wants to refer to registers by handle, e.g.
across a foreign-function or RPC boundary.

Handles carry a generation counter. Destroying a register bumps the
generation of its slot, so a stale handle can never reach a register
created later in the same slot.

Example
-------
>>> from tiny_qsim.registry import SimulatorRegistry
>>> reg = SimulatorRegistry(seed=42)
>>> h = reg.create(2)
>>> reg.apply(h, "H", [0])
>>> reg.apply(h, "CNOT", [0, 1])
>>> sorted(reg.measure(h, 1000))
['00', '11']
>>> reg.destroy(h)
True
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from tiny_qsim import gates as g
from tiny_qsim.errors import InstanceNotFound, InvalidQubitIndex
from tiny_qsim.statevector import StateVector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Handle:
    """Opaque reference to a register held by a :class:`SimulatorRegistry`."""
    slot: int
    generation: int


@dataclass
class _Slot:
    generation: int = 0
    register: StateVector | None = None
    lock: threading.Lock = field(default_factory=threading.Lock)


def _is_live(slot: _Slot, handle: Handle) -> bool:
    return slot.register is not None and slot.generation == handle.generation


class SimulatorRegistry:
    """
    Owns registers and exposes them through generation-checked handles.

    Every live register has its own lock; all calls that touch a register
    hold that lock, so one register is never read and written at once
    while distinct registers proceed independently.

    Parameters
    ----------
    seed : int | None
        Root seed. Each created register gets its own generator spawned
        from it, so a seeded registry replays identically.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._slots: list[_Slot] = []
        self._free: list[int] = []
        self._table_lock = threading.Lock()
        self._seed_seq = np.random.SeedSequence(seed)

    # -- Lifecycle ----------------------------------------------------------

    def create(self, num_qubits: int) -> Handle:
        """Allocate a register in |00...0⟩ and return its handle."""
        if num_qubits < 0:
            raise ValueError(f"Number of qubits must be >= 0, got {num_qubits}")
        with self._table_lock:
            (child,) = self._seed_seq.spawn(1)
        register = StateVector(num_qubits, rng=np.random.default_rng(child))

        with self._table_lock:
            if self._free:
                index = self._free.pop()
                slot = self._slots[index]
            else:
                index = len(self._slots)
                slot = _Slot()
                self._slots.append(slot)
            slot.register = register
            handle = Handle(index, slot.generation)

        logger.debug("Created %d-qubit register %s", num_qubits, handle)
        return handle

    def destroy(self, handle: Handle) -> bool:
        """Release a register. Returns False if the handle was not live."""
        with self._table_lock:
            slot = self._lookup(handle)
            if slot is None:
                return False
            with slot.lock:
                slot.register = None
                slot.generation += 1
            self._free.append(handle.slot)

        logger.debug("Destroyed register %s", handle)
        return True

    def __len__(self) -> int:
        with self._table_lock:
            return sum(1 for slot in self._slots if slot.register is not None)

    def __contains__(self, handle: object) -> bool:
        if not isinstance(handle, Handle):
            return False
        with self._table_lock:
            return self._lookup(handle) is not None

    # -- Internal helpers ---------------------------------------------------

    def _lookup(self, handle: Handle) -> _Slot | None:
        """Caller must hold the table lock."""
        if not 0 <= handle.slot < len(self._slots):
            return None
        slot = self._slots[handle.slot]
        if slot.generation != handle.generation or slot.register is None:
            return None
        return slot

    def _slot_or_raise(self, handle: Handle) -> _Slot:
        with self._table_lock:
            slot = self._lookup(handle)
        if slot is None:
            raise InstanceNotFound(f"No live register for {handle}")
        return slot

    # -- Operations ---------------------------------------------------------

    def get(self, handle: Handle) -> StateVector:
        """
        Return the register behind ``handle``.

        The caller takes responsibility for not using it concurrently with
        other registry calls on the same handle.
        """
        return self._slot_or_raise(handle).register

    def apply(
        self,
        handle: Handle,
        gate_name: str,
        qubit_indices: Sequence[int],
        params: Sequence[float] = (),
    ) -> None:
        """
        Apply a catalog gate by name.

        Two-qubit gates read ``qubit_indices[0]`` as control and
        ``qubit_indices[1]`` as target; rotation angles are in radians.

        Raises
        ------
        InstanceNotFound
            If the handle is not live.
        UnknownGate
            If the name is unknown or the parameter count is wrong.
        InvalidQubitIndex
            If the qubit count does not match the gate or an index is invalid.
        """
        slot = self._slot_or_raise(handle)
        matrix = g.get_matrix(gate_name, tuple(params))
        arity = g.num_qubits(gate_name)
        qubits = tuple(qubit_indices)
        if len(qubits) != arity:
            raise InvalidQubitIndex(
                f"Gate '{gate_name}' acts on {arity} qubit(s), got {len(qubits)}"
            )

        with slot.lock:
            if not _is_live(slot, handle):
                raise InstanceNotFound(f"No live register for {handle}")
            register = slot.register
            if arity == 2:
                register.apply_two_qubit_gate(matrix, qubits[0], qubits[1])
            else:
                register.apply_gate(matrix, qubits)
        logger.debug("Applied %s%s to %s", gate_name, list(qubits), handle)

    def measure(self, handle: Handle, shots: int) -> dict[str, int]:
        """Sample counts; an absent handle yields ``{}``."""
        slot = self._slot_or_none(handle)
        if slot is None:
            return {}
        with slot.lock:
            if not _is_live(slot, handle):
                return {}
            return slot.register.measure(shots)

    def probabilities(self, handle: Handle) -> list[float]:
        """Basis-state probabilities; an absent handle yields ``[]``."""
        slot = self._slot_or_none(handle)
        if slot is None:
            return []
        with slot.lock:
            if not _is_live(slot, handle):
                return []
            return slot.register.get_probabilities().tolist()

    def fidelity(self, handle_a: Handle, handle_b: Handle) -> float:
        """Fidelity of two registers; 0.0 if either handle is absent."""
        slot_a = self._slot_or_none(handle_a)
        slot_b = self._slot_or_none(handle_b)
        if slot_a is None or slot_b is None:
            return 0.0

        # Locks are always taken in slot order
        by_index = {handle_a.slot: slot_a, handle_b.slot: slot_b}
        locks = [by_index[i].lock for i in sorted(by_index)]
        for lock in locks:
            lock.acquire()
        try:
            if not (_is_live(slot_a, handle_a) and _is_live(slot_b, handle_b)):
                return 0.0
            return slot_a.register.get_fidelity(slot_b.register)
        finally:
            for lock in reversed(locks):
                lock.release()

    def _slot_or_none(self, handle: Handle) -> _Slot | None:
        with self._table_lock:
            slot = self._lookup(handle)
        if slot is None:
            logger.warning("Query against absent register %s", handle)
        return slot
