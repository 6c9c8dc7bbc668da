"""Backend dispatch for numpy/torch compatibility.

Provides unified math operations that work with both numpy arrays and torch tensors.
Torch is imported lazily on first use to avoid loading it when not needed.
"""

import numpy as np
from typing import Any

Array = Any  # numpy.ndarray or torch.Tensor

# Lazy torch reference - only imported when needed
_torch = None


def _get_torch():
    """Get torch module, importing it on first use."""
    global _torch
    if _torch is None:
        import torch
        _torch = torch
    return _torch


def is_torch(x: Array) -> bool:
    """Check if x is a torch tensor."""
    return type(x).__module__.startswith('torch')


def asarray(x: Array) -> Array:
    """Pass tensors through, turn everything else into a float64 ndarray."""
    if is_torch(x):
        return x
    return np.asarray(x, dtype=np.float64)


def asarray_like(x: Array, reference: Array) -> Array:
    """Convert x to the array type, dtype and device of reference."""
    if is_torch(reference):
        if is_torch(x):
            return x
        return _get_torch().as_tensor(x, dtype=reference.dtype, device=reference.device)
    return np.asarray(x, dtype=np.float64)


def split_channels(x: Array, name: str) -> tuple[Array, Array, Array]:
    """Validate a (..., 3) color array and split it into its three channels."""
    x = asarray(x)
    if x.ndim == 0 or x.shape[-1] != 3:
        got = x.shape[-1] if x.ndim else 'a scalar'
        raise ValueError(f"{name}: input must have last dimension 3, got {got}")
    return x[..., 0], x[..., 1], x[..., 2]


class errstate:
    """Silence numpy floating-point warnings inside vectorized branch selects.

    Both sides of a where() are evaluated, so the discarded side may divide
    by zero. Torch never warns, so this is a no-op for tensors.
    """

    def __enter__(self):
        self._ctx = np.errstate(divide='ignore', invalid='ignore', over='ignore')
        self._ctx.__enter__()
        return self

    def __exit__(self, *exc):
        return self._ctx.__exit__(*exc)


# === Dispatched operations ===

def sin(x: Array) -> Array:
    if is_torch(x):
        return _get_torch().sin(x)
    return np.sin(x)


def cos(x: Array) -> Array:
    if is_torch(x):
        return _get_torch().cos(x)
    return np.cos(x)


def sqrt(x: Array) -> Array:
    if is_torch(x):
        return _get_torch().sqrt(x)
    return np.sqrt(x)


def cbrt(x: Array) -> Array:
    """Cube root (sign-preserving)."""
    if is_torch(x):
        torch = _get_torch()
        return torch.sign(x) * torch.abs(x).pow(1/3)
    return np.cbrt(x)


def pow(x: Array, exp: float) -> Array:
    if is_torch(x):
        return _get_torch().pow(x, exp)
    return np.power(x, exp)


def abs(x: Array) -> Array:
    if is_torch(x):
        return _get_torch().abs(x)
    return np.abs(x)


def sign(x: Array) -> Array:
    if is_torch(x):
        return _get_torch().sign(x)
    return np.sign(x)


def clip(x: Array, lo: float, hi: float) -> Array:
    if is_torch(x):
        return _get_torch().clamp(x, lo, hi)
    return np.clip(x, lo, hi)


def where(cond: Array, true_val: Array, false_val: Array) -> Array:
    if is_torch(cond):
        return _get_torch().where(cond, true_val, false_val)
    return np.where(cond, true_val, false_val)


def stack(arrays: list[Array], axis: int = -1) -> Array:
    """Stack arrays along a new axis."""
    if is_torch(arrays[0]):
        return _get_torch().stack(arrays, dim=axis)
    return np.stack(arrays, axis=axis)


def broadcast_arrays(*arrays: Array) -> tuple[Array, ...]:
    """Broadcast arrays against each other to a common shape."""
    if is_torch(arrays[0]):
        return _get_torch().broadcast_tensors(*arrays)
    return tuple(np.broadcast_arrays(*arrays))


def atan2(y: Array, x: Array) -> Array:
    if is_torch(y):
        return _get_torch().atan2(y, x)
    return np.arctan2(y, x)


def minimum(x: Array, y: Array) -> Array:
    if is_torch(x):
        return _get_torch().minimum(x, y)
    return np.minimum(x, y)


def maximum(x: Array, y: Array) -> Array:
    if is_torch(x):
        return _get_torch().maximum(x, y)
    return np.maximum(x, y)


def zeros_like(x: Array) -> Array:
    if is_torch(x):
        return _get_torch().zeros_like(x)
    return np.zeros_like(x)


def full_like(x: Array, value: float) -> Array:
    if is_torch(x):
        return _get_torch().full_like(x, value)
    return np.full_like(x, value)


def all_along_axis(x: Array, axis: int) -> Array:
    """Check if all values are True along axis."""
    if is_torch(x):
        return _get_torch().all(x, dim=axis)
    return np.all(x, axis=axis)


def count_true(x: Array) -> int:
    """Number of True entries in a boolean array."""
    if is_torch(x):
        return int(x.sum().item())
    return int(np.count_nonzero(x))
