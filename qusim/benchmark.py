"""
Benchmark — random circuits through every execution path.

Side-by-side comparison of:
  1. Single-worker storage, raw circuit (reference)
  2. Multi-worker storage, raw circuit
  3. Single-worker storage, optimized (merged) circuit
  4. Multi-worker storage, optimized circuit

Each run records wall time and the largest amplitude deviation from the
reference, so a speedup never hides a wrong answer.
"""

import time
from dataclasses import dataclass

import numpy as np

from qusim.core.circuit import QuantumCircuit, optimize
from qusim.core.state import QuantumState
from qusim.logging_config import setup_logging


@dataclass
class BenchmarkResult:
    method: str
    n_qubits: int
    n_gates: int
    wall_time_ms: float
    max_deviation: float


def random_circuit(n_qubits: int, depth: int, seed: int = 42) -> QuantumCircuit:
    """Layers of random single-qubit rotations followed by a CNOT ladder."""
    rng = np.random.default_rng(seed)
    circuit = QuantumCircuit(n_qubits)
    add_rotation = [circuit.add_rx_gate, circuit.add_ry_gate, circuit.add_rz_gate]
    for _ in range(depth):
        for q in range(n_qubits):
            if rng.random() < 0.3:
                circuit.add_h_gate(q)
            add_rotation[int(rng.integers(3))](q, float(rng.uniform(0, 2 * np.pi)))
        for q in range(n_qubits - 1):
            circuit.add_cnot_gate(q, q + 1)
    return circuit


def _timed_run(circuit: QuantumCircuit, use_multi_worker: bool,
               seed: int) -> tuple[np.ndarray, float]:
    state = QuantumState(circuit.qubit_count, use_multi_worker=use_multi_worker)
    state.set_random_state(seed)
    t0 = time.perf_counter()
    circuit.execute(state)
    wall_ms = (time.perf_counter() - t0) * 1000
    return state.get_vector(), wall_ms


def run_single_benchmark(n_qubits: int, depth: int = 10,
                         seed: int = 42) -> list[BenchmarkResult]:
    """Run every execution path on one random circuit."""
    raw = random_circuit(n_qubits, depth, seed=seed)
    merged = optimize(raw)
    results = []

    reference, ref_ms = _timed_run(raw, use_multi_worker=False, seed=seed)
    results.append(BenchmarkResult("single_raw", n_qubits, raw.gate_count, ref_ms, 0.0))

    for method, circuit, multi in [
        ("multi_raw", raw, True),
        ("single_optimized", merged, False),
        ("multi_optimized", merged, True),
    ]:
        vector, wall_ms = _timed_run(circuit, use_multi_worker=multi, seed=seed)
        results.append(BenchmarkResult(
            method=method,
            n_qubits=n_qubits,
            n_gates=circuit.gate_count,
            wall_time_ms=wall_ms,
            max_deviation=float(np.max(np.abs(vector - reference))),
        ))
    return results


def run_benchmark_suite(qubit_sizes: list[int] | None = None,
                        depth: int = 10,
                        n_instances: int = 3) -> list[BenchmarkResult]:
    """Run benchmarks across several register sizes and random instances."""
    if qubit_sizes is None:
        qubit_sizes = [8, 12, 16, 18]

    all_results = []
    for n in qubit_sizes:
        print(f"\n{'='*70}")
        print(f"  Random circuits: {n} qubits, depth {depth}, {n_instances} instances")
        print(f"{'='*70}")

        for instance in range(n_instances):
            results = run_single_benchmark(n, depth=depth, seed=1000 * n + instance)
            all_results.extend(results)
            for r in results:
                print(f"  {r.method:<18s} | {r.n_gates:5d} gates | "
                      f"{r.wall_time_ms:8.1f}ms | max dev {r.max_deviation:.2e}")

    return all_results


def print_summary(results: list[BenchmarkResult]):
    """Average wall time and worst deviation per method and size."""
    methods = list(dict.fromkeys(r.method for r in results))
    sizes = sorted(set(r.n_qubits for r in results))

    print(f"\n{'='*70}")
    print(f"  AGGREGATE SUMMARY")
    print(f"{'='*70}")

    for n in sizes:
        print(f"\n  {n} qubits:")
        print(f"  {'Method':<18s} | {'Avg Gates':>9s} | {'Avg Time':>10s} | {'Worst Dev':>9s}")
        print(f"  {'-'*18}-+-{'-'*9}-+-{'-'*10}-+-{'-'*9}")
        for method in methods:
            subset = [r for r in results if r.method == method and r.n_qubits == n]
            if not subset:
                continue
            avg_gates = np.mean([r.n_gates for r in subset])
            avg_time = np.mean([r.wall_time_ms for r in subset])
            worst = max(r.max_deviation for r in subset)
            print(f"  {method:<18s} | {avg_gates:>9.0f} | {avg_time:>8.1f}ms | {worst:>9.1e}")


if __name__ == "__main__":
    setup_logging()
    print("qusim — execution path benchmark")
    print()

    results = run_benchmark_suite(qubit_sizes=[8, 12, 16, 18], depth=10, n_instances=3)
    print_summary(results)
