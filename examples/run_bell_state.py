"""Example: Prepare and sample a Bell state with tiny-qsim."""
import sys
sys.path.insert(0, 'src')

from tiny_qsim import StateVector, gates, Circuit, show_counts

print("=" * 50)
print("tiny-qsim: Bell State Example")
print("=" * 50)

# Directly on a register
sv = StateVector(2, seed=42)
sv.apply_single_qubit_gate(gates.H, 0)
sv.apply_two_qubit_gate(gates.CNOT, 0, 1)
print(f"\nProbabilities: {sv.get_probabilities()}")
print(show_counts(sv.measure(1000)))

# Same thing as a circuit
result = Circuit(2, name="bell").bell_state().run(shots=1000, seed=42)
print(f"\nEntropy: {result.entropy():.3f} bits")
print(f"Classical fidelity: {result.classical_fidelity():.4f}")

print("\nExpected: ~50% |00⟩ and ~50% |11⟩ (entangled!)")
