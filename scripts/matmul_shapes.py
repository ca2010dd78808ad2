"""
scripts/matmul_shapes.py

Print the result shape of matmul for a few operand shape pairs, including
1-D promotion and batch broadcasting.

Usage
-----
python scripts/matmul_shapes.py
python scripts/matmul_shapes.py --a 3 --b 1,3,4,3,1
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC_DIR = os.path.join(ROOT_DIR, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from rashgrad import NDArray, ShapeMismatchError

logger = logging.getLogger("matmul_shapes")

DEFAULT_CASES = [
    ((3,), (3,)),
    ((2, 3), (3, 4)),
    ((3,), (3, 4)),
    ((2, 3), (3,)),
    ((3,), (1, 3, 4, 3, 1)),
    ((5, 2, 3), (3, 4)),
    ((2, 1, 2, 3), (4, 3, 2)),
    ((2, 3), (4, 5)),
]


def _parse_shape(text: str) -> tuple[int, ...]:
    return tuple(int(p) for p in text.split(",") if p.strip())


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--a", type=_parse_shape, default=None, help="e.g. 2,3")
    ap.add_argument("--b", type=_parse_shape, default=None, help="e.g. 3,4")
    ap.add_argument("--log-level", default="INFO")
    args = ap.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(message)s",
    )

    cases = [(args.a, args.b)] if args.a and args.b else DEFAULT_CASES
    for a_shape, b_shape in cases:
        a = NDArray.rand(a_shape)
        b = NDArray.rand(b_shape)
        try:
            out = a @ b
        except ShapeMismatchError as exc:
            logger.info("%s @ %s -> error: %s", a_shape, b_shape, exc)
            continue
        logger.info("%s @ %s -> %s", a_shape, b_shape, out.shape)


if __name__ == "__main__":
    main()
