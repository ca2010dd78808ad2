"""
Library-wide constants and process-level random seeding.

rashgrad has no configuration files; the few knobs it exposes are module
constants read at call time by the array engine and the printer.
"""

import numpy as np

# Element type of every array buffer (IEEE double precision).
DTYPE = np.float64

# Format string applied to each element by the nested-bracket printer.
PRINT_FORMAT = "g"

# Longest label composed from operand labels; longer ones fall back to
# `<op>_<8 hex>`.
MAX_LABEL_LENGTH = 64


def manual_seed(seed: int) -> None:
    """
    Seed the process-level random source used by `rand` constructors.

    Parameters
    ----------
    seed : int
        Seed forwarded to NumPy's global generator.
    """
    np.random.seed(int(seed))
