"""
Integration Tests — end-to-end runs of the simulator.

Tests:
  1. State preparation and sampling
  2. Circuits with merged gates and measurements
  3. Observables on prepared states
  4. Multi-worker storage agreement
  5. Optimized circuits and Born rule validation
"""

import sys

import numpy as np

from qusim import Observable, QuantumCircuit, QuantumState, gates, merge, optimize
from qusim.benchmark import random_circuit, run_single_benchmark
from qusim.stats import SamplingValidator


def test_bell_sampling():
    """Bell pair sampling only yields |00⟩ and |11⟩."""
    print("  1a. Bell pair sampling...", end=" ")
    state = QuantumState(2)
    circuit = QuantumCircuit(2)
    circuit.add_h_gate(0)
    circuit.add_cnot_gate(0, 1)
    circuit.execute(state)

    samples = state.sample(2000, seed=1)
    assert set(samples) == {0, 3}, f"Unexpected outcomes {set(samples)}"
    frac = samples.count(3) / len(samples)
    assert abs(frac - 0.5) < 0.05, f"|11⟩ fraction {frac:.3f} not near 0.5"

    print(f"PASS (|11⟩ fraction={frac:.3f})")


def test_teleportation():
    """Teleport RY(θ)|0⟩ from qubit 0 to qubit 2 with measurement feed-forward."""
    print("  2a. Teleportation...", end=" ")
    theta = 1.1
    for seed in range(8):
        state = QuantumState(3)
        prep = QuantumCircuit(3)
        prep.add_ry_gate(0, theta)
        prep.add_h_gate(1)
        prep.add_cnot_gate(1, 2)
        prep.add_cnot_gate(0, 1)
        prep.add_h_gate(0)
        prep.add_measurement(0, register=0, seed=seed)
        prep.add_measurement(1, register=1, seed=seed + 100)
        prep.execute(state)

        fix = QuantumCircuit(3)
        if state.get_classical_value(1):
            fix.add_x_gate(2)
        if state.get_classical_value(0):
            fix.add_z_gate(2)
        fix.execute(state)

        p_zero = state.get_zero_probability(2)
        assert abs(p_zero - np.cos(theta / 2) ** 2) < 1e-10, f"seed {seed}: p0={p_zero}"

    print("PASS")


def test_merged_circuit_expectation():
    """Merged gate sequence gives the same expectation value as the raw one."""
    print("  3a. Merged expectation value...", end=" ")
    obs = Observable(3)
    obs.add_operator(0.5, "Z 0 Z 1")
    obs.add_operator(-0.25, "X 2")

    raw = QuantumCircuit(3)
    seq = [gates.h(0), gates.cnot(0, 1), gates.ry(2, 0.4), gates.rz(1, 0.9)]
    for gate in seq:
        raw.add_gate_copy(gate)

    merged = QuantumCircuit(3)
    merged.add_gate_copy(merge(seq[0], seq[1]))
    merged.add_gate_copy(merge(seq[2], seq[3]))

    a, b = QuantumState(3), QuantumState(3)
    raw.execute(a)
    merged.execute(b)
    va, vb = obs.expectation_value(a), obs.expectation_value(b)
    assert abs(va.real - vb.real) < 1e-12, f"{va} != {vb}"

    print(f"PASS (⟨O⟩={va.real:.4f})")


def test_multi_worker_benchmark_agrees():
    """Every execution path in the benchmark matches the reference state."""
    print("  4a. Execution paths agree...", end=" ")
    results = run_single_benchmark(8, depth=4, seed=7)
    worst = max(r.max_deviation for r in results)
    assert worst < 1e-10, f"max deviation {worst:.2e}"
    multi = [r for r in results if r.method == "multi_raw"][0]
    assert multi.max_deviation == 0.0, "multi-worker must be bit-identical"

    print(f"PASS (worst dev={worst:.1e})")


def test_optimized_circuit_samples_validate():
    """Samples from an optimized random circuit pass Born rule validation."""
    print("  5a. Optimized circuit sampling...", end=" ")
    circuit = optimize(random_circuit(5, depth=6, seed=3))
    state = QuantumState(5)
    circuit.execute(state)

    validator = SamplingValidator(state, significance=0.001)
    passed, results = validator.batch_verdict(state.sample(5000, seed=11))
    assert passed, f"validation failed: {[r.detail for r in results]}"

    print("PASS")


def run_all_tests():
    print("=" * 60)
    print("  qusim integration tests")
    print("=" * 60)

    tests = [
        ("State preparation", [
            test_bell_sampling,
        ]),
        ("Circuits and measurement", [
            test_teleportation,
        ]),
        ("Observables", [
            test_merged_circuit_expectation,
        ]),
        ("Multi-worker storage", [
            test_multi_worker_benchmark_agrees,
        ]),
        ("Optimization and validation", [
            test_optimized_circuit_samples_validate,
        ]),
    ]

    total = 0
    passed = 0
    failed = 0
    errors = []

    for group_name, group_tests in tests:
        print(f"\n{group_name}:")
        for test_fn in group_tests:
            total += 1
            try:
                test_fn()
                passed += 1
            except Exception as e:
                failed += 1
                errors.append((test_fn.__name__, str(e)))
                print(f"  FAIL: {test_fn.__name__}: {e}")

    print(f"\n{'='*60}")
    print(f"  Results: {passed}/{total} passed, {failed} failed")
    if errors:
        print(f"\n  Failures:")
        for name, err in errors:
            print(f"    {name}: {err}")
    print(f"{'='*60}")

    return failed == 0


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
