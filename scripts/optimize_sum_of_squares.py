"""
scripts/optimize_sum_of_squares.py

Minimise f(a, b) = a*a + b*b from a = 5, b = 1 by gradient descent.

The step size of each variable shrinks with its own gradient
(lr = grad * scale), so the loop stops once both gradients are tiny.
Parameters are tracked in a TensorRegistry, which is also used to zero
gradients and to print the current state.

Usage
-----
python scripts/optimize_sum_of_squares.py
python scripts/optimize_sum_of_squares.py --scale 0.01 --tol 1e-6 --log-level DEBUG
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

from rashgrad import Tensor, TensorRegistry

logger = logging.getLogger("optimize_sum_of_squares")


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--a", type=float, default=5.0)
    ap.add_argument("--b", type=float, default=1.0)
    ap.add_argument("--scale", type=float, default=1e-3)
    ap.add_argument("--tol", type=float, default=1e-4)
    ap.add_argument("--max-iters", type=int, default=100000)
    ap.add_argument("--log-level", default="INFO")
    args = ap.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )

    registry = TensorRegistry()
    a = registry.register(Tensor(args.a, requires_grad=True, label="a"))
    b = registry.register(Tensor(args.b, requires_grad=True, label="b"))

    lr_a = lr_b = 1.0
    it = 0
    while lr_a + lr_b > args.tol and it < args.max_iters:
        registry.zero_grad()

        d = a * a
        e = b * b
        f = d + e
        f.backward()

        ga = a.fetch_grad()
        gb = b.fetch_grad()
        lr_a = ga.item() * args.scale
        lr_b = gb.item() * args.scale

        a.update_data(a.fetch_data() - ga * lr_a)
        b.update_data(b.fetch_data() - gb * lr_b)

        if it % 1000 == 0:
            logger.info("iteration %d f=%.6g", it, f.item())
            for label in registry:
                logger.debug("%s", registry[label])
        it += 1

    logger.info("stopped after %d iteration(s): a=%.6g b=%.6g", it, a.item(), b.item())


if __name__ == "__main__":
    main()
