"""Maximum in-gamut saturation for a hue.

Saturation here is S = C / L. Along a hue the sRGB gamut reaches its
highest saturation where one of the linear r, g or b channels first drops
below zero; which one depends on the hue.

Adapted from MIT-licensed code, Copyright (c) 2021 Björn Ottosson. See NOTICE.
"""

import enum

import numpy as np

from . import _backend as B
from ._backend import Array
from ._halley import lms_hue_coefficients, cubic_terms, channel_derivatives, halley_step
from .basis import LMS_TO_RGB


class ClippingChannel(enum.IntEnum):
    """Linear sRGB channel that limits saturation for a hue."""

    RED = 0
    GREEN = 1
    BLUE = 2


# Polynomial fit k0..k4 of the max saturation, per limiting channel
_SATURATION_POLYNOMIALS = {
    ClippingChannel.RED: (1.19086277, 1.76576728, 0.59662641, 0.75515197, 0.56771245),
    ClippingChannel.GREEN: (0.73956515, -0.45954404, 0.08285427, 0.12541070, 0.14503204),
    ClippingChannel.BLUE: (1.35733652, -0.00915799, -1.15130210, -0.50559606, 0.00692167),
}


def _branch_masks(a: Array, b: Array) -> tuple[Array, Array]:
    """Red and green branch masks. The tests overlap near the boundaries,
    so green only applies where red did not, and blue takes the rest."""
    red = -1.88170328 * a - 0.80936493 * b > 1
    green = (1.81444104 * a - 1.19445276 * b > 1) & ~red
    return red, green


def _select(red: Array, green: Array, values, like: Array) -> Array:
    r, g, b = values
    return B.where(red, B.full_like(like, r), B.where(green, B.full_like(like, g), B.full_like(like, b)))


def select_clipping_channel(a: Array, b: Array) -> Array:
    """Which channel clips first for unit hue (a, b), as ClippingChannel codes."""
    a, b = B.asarray(a), B.asarray(b)
    red, green = _branch_masks(a, b)
    codes = _select(red, green, tuple(ClippingChannel), a)
    if B.is_torch(codes):
        return codes.long()
    return codes.astype(np.int64)


def compute_max_saturation(a: Array, b: Array) -> Array:
    """Find the maximum saturation S = C/L that fits in sRGB for a hue.

    a and b must be normalized so a^2 + b^2 == 1.

    The polynomial estimate is refined by exactly one Halley step. That
    gives a relative error below 1e-6 except for some blue hues where dS/dh
    is close to infinite.
    """
    a, b = B.asarray(a), B.asarray(b)
    red, green = _branch_masks(a, b)

    k0, k1, k2, k3, k4 = (
        _select(red, green, coeffs, a)
        for coeffs in zip(*(_SATURATION_POLYNOMIALS[ch] for ch in ClippingChannel))
    )
    weights = tuple(
        _select(red, green, column, a)
        for column in zip(*LMS_TO_RGB)
    )

    S = k0 + k1 * a + k2 * b + k3 * a * a + k4 * a * b

    k_l, k_m, k_s = lms_hue_coefficients(a, b)
    roots = (1 + S * k_l, 1 + S * k_m, 1 + S * k_s)
    terms = cubic_terms(roots, (k_l, k_m, k_s))
    f, f1, f2 = channel_derivatives(weights, terms)
    delta, _ = halley_step(f, f1, f2)
    return S + delta
