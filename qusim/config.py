"""Configuration for qusim, read from environment variables at import."""

import os
from pathlib import Path
from typing import Optional

# Allocation cap: 2^30 complex128 amplitudes = 16 GiB
MAX_QUBITS = int(os.getenv("QUSIM_MAX_QUBITS", "30"))

# Multi-worker storage
WORKERS = max(1, int(os.getenv("QUSIM_WORKERS", str(os.cpu_count() or 1))))

# Gate merge
MAX_MERGE_QUBITS = int(os.getenv("QUSIM_MAX_MERGE_QUBITS", "10"))

# Numerics
TOLERANCE = float(os.getenv("QUSIM_TOLERANCE", "1e-10"))

# Logging settings
LOG_LEVEL = os.getenv("QUSIM_LOG_LEVEL", "WARNING")
LOG_FORMAT = os.getenv("QUSIM_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
LOG_FILE: Optional[Path] = Path(os.environ["QUSIM_LOG_FILE"]) if os.getenv("QUSIM_LOG_FILE") else None

__all__ = [
    "MAX_QUBITS",
    "WORKERS",
    "MAX_MERGE_QUBITS",
    "TOLERANCE",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE",
]
