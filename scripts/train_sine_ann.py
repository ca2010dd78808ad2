"""
scripts/train_sine_ann.py

Fit a one-hidden-layer ReLU network to y = sin(x) on [0, 2*pi).

Model
-----
    hidden = relu(X @ W1.T + b1)        W1: (H, 1), b1: (H,)
    pred   = hidden @ W2.T + b2         W2: (1, H), b2: (1,)
    loss   = (pred - y) ** 2            backward() seeds ones, i.e. d(sum)/d.

Usage
-----
python scripts/train_sine_ann.py
python scripts/train_sine_ann.py --epochs 20000 --hidden 15 --lr 1e-4 --seed 0
python scripts/train_sine_ann.py --log-level DEBUG --epochs 1
"""

from __future__ import annotations

import argparse
import logging
import math
import os
import sys

import numpy as np

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC_DIR = os.path.join(ROOT_DIR, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from rashgrad import SGD, ReLU, Tensor, manual_seed

logger = logging.getLogger("train_sine_ann")


def prepare_dataset(num_samples: int) -> tuple[np.ndarray, np.ndarray]:
    """Shuffled samples of x in [0, 2*pi) and sin(x), each shaped (N, 1)."""
    idx = np.random.permutation(num_samples)
    x = idx.astype(np.float64) / num_samples * 2.0 * math.pi
    return x.reshape(num_samples, 1), np.sin(x).reshape(num_samples, 1)


def main() -> None:
    ap = argparse.ArgumentParser(description="Fit a ReLU network to sin(x).")
    ap.add_argument("--samples", type=int, default=100)
    ap.add_argument("--hidden", type=int, default=15)
    ap.add_argument("--epochs", type=int, default=20000)
    ap.add_argument("--lr", type=float, default=1e-4)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--print-every", type=int, default=1000)
    ap.add_argument("--log-level", default="INFO")
    args = ap.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    manual_seed(args.seed)

    x_np, y_np = prepare_dataset(args.samples)
    X = Tensor(x_np, label="X")
    y = Tensor(y_np, label="y")

    w1 = Tensor.rand((args.hidden, 1), requires_grad=True, label="W1")
    b1 = Tensor.rand((args.hidden,), requires_grad=True, label="b1")
    w2 = Tensor.rand((1, args.hidden), requires_grad=True, label="W2")
    b2 = Tensor.rand((1,), requires_grad=True, label="b2")

    relu = ReLU()
    opt = SGD([w1, b1, w2, b2], lr=args.lr)

    for step in range(args.epochs):
        opt.zero_grad()

        hidden = relu(Tensor.matmul(X, w1.T) + b1)
        hidden.label = "hidden"
        pred = Tensor.matmul(hidden, w2.T) + b2
        pred.label = "pred"
        loss = (pred - y).pow(2)
        loss.label = "squared_error"

        loss.backward()
        opt.step()

        if step % args.print_every == 0 or step == args.epochs - 1:
            logger.info("step %d loss %.6f", step, loss.fetch_data().sum().item())

    logger.info("final W2: %s", w2.fetch_data())


if __name__ == "__main__":
    main()
