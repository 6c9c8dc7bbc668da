"""One-step Halley refinement over the cubic sRGB gamut surface.

Along any straight path through OKLab, the cube-root LMS components are
affine in the path parameter, so every linear sRGB channel is a weighted
sum of three cubics. Max-saturation search and gamut line intersection
both refine a closed-form estimate with a single Halley step on such a
channel; they only differ in how the path is parameterized.

Adapted from MIT-licensed code, Copyright (c) 2021 Björn Ottosson. See NOTICE.
"""

from ._backend import Array
from .basis import OKLAB_TO_LMS


def lms_hue_coefficients(a: Array, b: Array) -> tuple[Array, Array, Array]:
    """Rate of change of (l', m', s') per unit chroma along hue (a, b)."""
    k_l = OKLAB_TO_LMS[0][1] * a + OKLAB_TO_LMS[0][2] * b
    k_m = OKLAB_TO_LMS[1][1] * a + OKLAB_TO_LMS[1][2] * b
    k_s = OKLAB_TO_LMS[2][1] * a + OKLAB_TO_LMS[2][2] * b
    return k_l, k_m, k_s


def cubic_terms(roots: tuple[Array, Array, Array], slopes: tuple[Array, Array, Array]):
    """Cubes of (l', m', s') with first and second derivatives.

    Args:
        roots: current (l', m', s') values
        slopes: d(l', m', s')/dx for the path parameter x

    Returns:
        ((l, m, s), (dl, dm, ds), (d2l, d2m, d2s))
    """
    values = tuple(r * r * r for r in roots)
    first = tuple(3 * k * r * r for r, k in zip(roots, slopes))
    second = tuple(6 * k * k * r for r, k in zip(roots, slopes))
    return values, first, second


def channel_derivatives(weights, terms, offset: float = 0.0) -> tuple[Array, Array, Array]:
    """Value, first and second derivative of one channel (minus offset)."""
    wl, wm, ws = weights
    (l, m, s), (l1, m1, s1), (l2, m2, s2) = terms
    f = wl * l + wm * m + ws * s - offset
    f1 = wl * l1 + wm * m1 + ws * s1
    f2 = wl * l2 + wm * m2 + ws * s2
    return f, f1, f2


def halley_step(f: Array, f1: Array, f2: Array) -> tuple[Array, Array]:
    """Halley correction for a root of f.

    Returns (delta, u) where delta = -f * u is the step to add and
    u = f' / (f'^2 - f f''/2). A negative u means the step heads away from
    the root on this branch.
    """
    u = f1 / (f1 * f1 - 0.5 * f * f2)
    return -f * u, u
