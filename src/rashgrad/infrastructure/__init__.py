"""
Concrete NumPy-backed implementations: arrays, autograd, tensors,
activations and the optimizer.
"""
