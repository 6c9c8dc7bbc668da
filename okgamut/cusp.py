"""Gamut cusp: the point of maximum chroma for a hue.

Adapted from MIT-licensed code, Copyright (c) 2021 Björn Ottosson. See NOTICE.
"""

from . import _backend as B
from ._backend import Array
from .basis import oklab_to_linear_rgb
from .saturation import compute_max_saturation


def max_channel(r: Array, g: Array, b: Array) -> Array:
    return B.maximum(B.maximum(r, g), b)


def find_cusp(a: Array, b: Array) -> tuple[Array, Array]:
    """Find (L_cusp, C_cusp) for unit hue (a, b).

    The max-saturation ray is scaled until its brightest linear channel
    reaches 1. If that channel is not positive the result is inf/NaN.
    """
    a, b = B.asarray(a), B.asarray(b)
    S_cusp = compute_max_saturation(a, b)

    # Linear sRGB at L = 1 along the max saturation ray
    r, g, b_ = oklab_to_linear_rgb(B.full_like(a, 1.0), S_cusp * a, S_cusp * b)
    with B.errstate():
        L_cusp = B.pow(1 / max_channel(r, g, b_), 1 / 3)
    C_cusp = L_cusp * S_cusp

    return L_cusp, C_cusp


def cusp_to_st(L_cusp: Array, C_cusp: Array) -> tuple[Array, Array]:
    """Slopes of the gamut triangle edges: S = C/L below, T = C/(1-L) above."""
    return C_cusp / L_cusp, C_cusp / (1 - L_cusp)
