"""
Stats — Born rule compliance testing for sampled basis indices.

A QuantumState knows its own output distribution exactly, so samples drawn
from it can be checked against |ψ|² directly.

Tests:
  1. Chi-squared goodness-of-fit against the state's Born distribution
  2. Entropy: sample entropy compared with the state's Shannon entropy
  3. Independence: sequential samples should show no lag-1 autocorrelation
"""

from dataclasses import dataclass

import numpy as np
from scipy import stats as scipy_stats

from qusim import config
from qusim.core.state import QuantumState
from qusim.logging_config import get_logger, setup_logging

logger = get_logger("stats")


@dataclass
class StatisticalTestResult:
    """Result of a statistical validity test."""
    test_name: str
    passed: bool
    statistic: float
    p_value: float
    threshold: float
    detail: str = ""


class SamplingValidator:
    """Tests whether sampled indices follow a state's Born distribution."""

    def __init__(self, state: QuantumState, significance: float = 0.01,
                 entropy_tolerance: float = 0.25):
        self.state = state
        self.significance = significance  # p-value threshold
        self.entropy_tolerance = entropy_tolerance  # bits
        self._reference: np.ndarray | None = None

    def reference_distribution(self) -> np.ndarray:
        """|ψ|², normalized, computed once per validator."""
        if self._reference is None:
            probs = self.state.probabilities()
            self._reference = probs / probs.sum()
        return self._reference

    def _histogram(self, samples: list[int]) -> np.ndarray:
        return np.bincount(np.asarray(samples, dtype=np.int64),
                           minlength=self.state.dim).astype(float)

    def chi_squared_test(self, samples: list[int]) -> StatisticalTestResult:
        """Chi-squared goodness-of-fit of the observed index frequencies."""
        observed = self._histogram(samples)
        expected = self.reference_distribution() * len(samples)

        # Only test bins with expected count >= 5 (chi-squared requirement)
        mask = expected >= 5
        if mask.sum() < 2:
            # A (nearly) deterministic state: every sample must hit the support
            outside = float(observed[expected == 0].sum())
            return StatisticalTestResult(
                test_name="chi_squared_born_rule",
                passed=outside == 0,
                statistic=outside,
                p_value=1.0 if outside == 0 else 0.0,
                threshold=self.significance,
                detail=f"bins_tested={int(mask.sum())}, samples_off_support={int(outside)}",
            )

        chi2_stat = np.sum((observed[mask] - expected[mask]) ** 2 / expected[mask])
        dof = int(mask.sum()) - 1
        p_value = float(scipy_stats.chi2.sf(chi2_stat, dof))

        return StatisticalTestResult(
            test_name="chi_squared_born_rule",
            passed=p_value >= self.significance,
            statistic=float(chi2_stat),
            p_value=p_value,
            threshold=self.significance,
            detail=f"dof={dof}, bins_tested={int(mask.sum())}",
        )

    def entropy_test(self, samples: list[int]) -> StatisticalTestResult:
        """Compare the empirical entropy of the samples with the state's entropy.

        A soft check: the plug-in estimator is biased low for small batches.
        """
        hist = self._histogram(samples)
        hist = hist / hist.sum()
        hist = hist[hist > 0]
        empirical = float(-np.sum(hist * np.log2(hist)))
        reference = self.state.entropy()
        gap = abs(empirical - reference)

        return StatisticalTestResult(
            test_name="entropy",
            passed=gap <= self.entropy_tolerance,
            statistic=empirical,
            p_value=float("nan"),  # not a hypothesis test
            threshold=self.entropy_tolerance,
            detail=f"entropy={empirical:.3f}, expected={reference:.3f} bits",
        )

    def independence_test(self, samples: list[int]) -> StatisticalTestResult:
        """Lag-1 autocorrelation of the sample sequence."""
        if len(samples) < 20:
            return StatisticalTestResult(
                test_name="independence",
                passed=True,
                statistic=0.0,
                p_value=1.0,
                threshold=self.significance,
                detail="Too few samples for autocorrelation test",
            )

        values = np.asarray(samples, dtype=float)
        if values.std() == 0:
            # A single repeated index is independent only if the state is a basis state
            deterministic = self.reference_distribution().max() > 1 - config.TOLERANCE
            return StatisticalTestResult(
                test_name="independence",
                passed=bool(deterministic),
                statistic=0.0,
                p_value=1.0 if deterministic else 0.0,
                threshold=self.significance,
                detail="All samples identical",
            )

        norm = (values - values.mean()) / values.std()
        n = len(norm)
        autocorr = np.sum(norm[:-1] * norm[1:]) / (n - 1)

        # Under independence, autocorrelation ~ N(0, 1/n)
        z_stat = autocorr * np.sqrt(n)
        p_value = float(2 * scipy_stats.norm.sf(abs(z_stat)))

        return StatisticalTestResult(
            test_name="independence",
            passed=p_value >= self.significance,
            statistic=float(autocorr),
            p_value=p_value,
            threshold=self.significance,
            detail=f"lag1_autocorr={autocorr:.4f}, z={z_stat:.2f}",
        )

    def full_validation(self, samples: list[int]) -> list[StatisticalTestResult]:
        """Run all statistical tests on a batch of samples."""
        return [
            self.chi_squared_test(samples),
            self.entropy_test(samples),
            self.independence_test(samples),
        ]

    def batch_verdict(self, samples: list[int]) -> tuple[bool, list[StatisticalTestResult]]:
        """Run all tests; the verdict rests on the chi-squared and independence tests."""
        results = self.full_validation(samples)
        critical = [r for r in results if r.test_name != "entropy"]
        passed = all(r.passed for r in critical)
        for r in results:
            logger.info("%s: %s (stat=%.4f, p=%.4f) %s", r.test_name,
                        "PASS" if r.passed else "FAIL", r.statistic, r.p_value, r.detail)
        return passed, results


def benchmark_stats():
    """Validate honest and uniform-random samples against a random state."""
    import time

    print("Sampling Validation Benchmark")
    print("=" * 60)

    state = QuantumState(6)
    state.set_random_state(seed=42)
    validator = SamplingValidator(state)

    batches = {
        "Honest sampler": state.sample(5000, seed=7),
        "Uniform sampler": [int(i) for i in
                            np.random.default_rng(99).integers(0, state.dim, size=5000)],
    }
    for label, samples in batches.items():
        print(f"\n{label}:")
        t0 = time.perf_counter()
        passed, results = validator.batch_verdict(samples)
        val_time = (time.perf_counter() - t0) * 1000
        print(f"  Verdict: {'PASS' if passed else 'FAIL'} ({val_time:.1f}ms)")
        for r in results:
            print(f"    {r.test_name}: {'PASS' if r.passed else 'FAIL'} "
                  f"(stat={r.statistic:.4f}, p={r.p_value:.4f}) {r.detail}")


if __name__ == "__main__":
    setup_logging()
    benchmark_stats()
