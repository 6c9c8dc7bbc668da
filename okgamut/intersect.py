"""Intersection of a line in the (L, C) plane of a hue with the sRGB gamut.

The line runs from the focal point (L0, 0) through (L1, C1):

    L = L0 * (1 - t) + t * L1
    C = t * C1

and the returned t is where it meets the gamut boundary. Below the cusp
the boundary is exactly the straight edge from black to the cusp. Above
it the boundary bulges outward from the straight cusp-to-white edge, so the
triangle estimate is refined by one Halley step against each channel.

Adapted from MIT-licensed code, Copyright (c) 2021 Björn Ottosson. See NOTICE.
"""

from . import _backend as B
from ._backend import Array
from ._halley import lms_hue_coefficients, cubic_terms, channel_derivatives, halley_step
from .basis import LMS_TO_RGB
from .cusp import find_cusp


def _refine_upper(a: Array, b: Array, L1: Array, C1: Array, L0: Array, t: Array) -> Array:
    """One Halley step from the triangle estimate t toward the curved upper boundary."""
    k_l, k_m, k_s = lms_hue_coefficients(a, b)

    dL = L1 - L0
    dC = C1
    slopes = (dL + dC * k_l, dL + dC * k_m, dL + dC * k_s)

    # If higher accuracy is required, this block can be repeated 2 or 3 times
    L = L0 * (1 - t) + t * L1
    C = t * C1
    roots = (L + C * k_l, L + C * k_m, L + C * k_s)
    terms = cubic_terms(roots, slopes)

    no_limit = B.full_like(t, float('inf'))
    step = no_limit
    for weights in LMS_TO_RGB:
        f, f1, f2 = channel_derivatives(weights, terms, offset=1.0)
        delta, u = halley_step(f, f1, f2)
        # The most restrictive channel wins; one heading away does not constrain t
        step = B.minimum(step, B.where(u >= 0, delta, no_limit))

    return t + step


def find_gamut_intersection(
    a: Array,
    b: Array,
    L1: Array,
    C1: Array,
    L0: Array,
    cusp: tuple[Array, Array] | None = None,
) -> Array:
    """Find t where the line from (L0, 0) to (L1, C1) crosses the gamut boundary.

    Args:
        a, b: Unit hue direction, a^2 + b^2 == 1
        L1, C1: Target point (t = 1)
        L0: Focal lightness on the achromatic axis (t = 0)
        cusp: Precomputed (L_cusp, C_cusp) for this hue, found if omitted

    Returns:
        Line parameter t of the boundary point
    """
    a = B.asarray(a)
    b, L1, C1, L0 = (B.asarray_like(x, a) for x in (b, L1, C1, L0))
    L_cusp, C_cusp = find_cusp(a, b) if cusp is None else cusp

    with B.errstate():
        lower = ((L1 - L0) * C_cusp - (L_cusp - L0) * C1) <= 0

        # Lower half: the boundary is a straight line, the triangle is exact
        t_lower = C_cusp * L0 / (C1 * L_cusp + C_cusp * (L0 - L1))

        # Upper half: intersect with the triangle first, then refine
        t_upper = C_cusp * (L0 - 1) / (C1 * (L_cusp - 1) + C_cusp * (L0 - L1))
        t_upper = _refine_upper(a, b, L1, C1, L0, t_upper)

        return B.where(lower, t_lower, t_upper)
