"""Adaptive gamut clipping toward a lightness-dependent focal point.

Reference: https://bottosson.github.io/posts/gamutclipping/
Adapted from MIT-licensed code, Copyright (c) 2021 Björn Ottosson. See NOTICE.

Out-of-gamut colors are moved along a straight line in the (L, C) plane of
their own hue, so hue is preserved, toward a focal point L0 on the gray
axis. L0 sits at 0.5 for low chroma and bends toward black or white for
very dark or very light colors, so they keep more of their lightness.
"""

import logging

from . import _backend as B
from ._backend import Array
from .basis import (
    oklab_to_linear_rgb,
    linear_rgb_to_oklab,
    linear_to_srgb,
    srgb_to_linear,
)
from .defaults import CLIP_CHROMA_EPSILON, CLIP_ALPHA, CLIP_L0_BASE
from .intersect import find_gamut_intersection

logger = logging.getLogger(__name__)


def _inside_cube(r: Array, g: Array, b: Array) -> Array:
    """True where every channel lies in [0, 1], faces included."""
    return (r <= 1) & (g <= 1) & (b <= 1) & (r >= 0) & (g >= 0) & (b >= 0)


def adaptive_focal_lightness(L: Array, C: Array) -> Array:
    """Focal lightness L0 for clipping a color of lightness L and chroma C."""
    Ld = L - CLIP_L0_BASE
    abs_Ld = B.abs(Ld)
    e1 = CLIP_L0_BASE + abs_Ld + CLIP_ALPHA * C
    return CLIP_L0_BASE * (1 + B.sign(Ld) * (e1 - B.sqrt(e1 * e1 - 2 * abs_Ld)))


def _clip_oklab_channels(L: Array, a: Array, b: Array) -> tuple[Array, Array, Array]:
    """Project OKLab channels onto the gamut boundary, no fast path."""
    raw_C = B.sqrt(a * a + b * b)
    C = B.maximum(raw_C, B.full_like(L, CLIP_CHROMA_EPSILON))

    # a / C is not a unit hue below the floor; the clipped chroma stays under it
    achromatic = raw_C < CLIP_CHROMA_EPSILON
    a_ = B.where(achromatic, B.full_like(C, 1.0), a / C)
    b_ = B.where(achromatic, B.zeros_like(C), b / C)

    L0 = adaptive_focal_lightness(L, C)
    t = find_gamut_intersection(a_, b_, L, C, L0)

    L_clipped = L0 * (1 - t) + t * L
    C_clipped = t * C
    return L_clipped, C_clipped * a_, C_clipped * b_


def _log_slow_path(name: str, inside: Array) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        total = inside.numel() if B.is_torch(inside) else inside.size
        logger.debug("%s: clipping %d of %d colors", name, total - B.count_true(inside), total)


def clip_oklab(lab: Array) -> Array:
    """Clip OKLab colors (..., 3) into the sRGB gamut.

    Colors whose linear sRGB channels already lie in [0, 1] are returned
    unchanged.
    """
    L, a, b = B.split_channels(lab, 'clip_oklab')
    r, g, b_lin = oklab_to_linear_rgb(L, a, b)
    inside = _inside_cube(r, g, b_lin)
    _log_slow_path('clip_oklab', inside)

    with B.errstate():
        clipped = _clip_oklab_channels(L, a, b)
    return B.stack([B.where(inside, x, y) for x, y in zip((L, a, b), clipped)], axis=-1)


def _clip_linear_channels(r: Array, g: Array, b: Array) -> tuple[Array, Array, Array]:
    with B.errstate():
        lab = _clip_oklab_channels(*linear_rgb_to_oklab(r, g, b))
    return oklab_to_linear_rgb(*lab)


def clip_linear(rgb: Array) -> Array:
    """Clip linear sRGB colors (..., 3) into the gamut, preserving hue."""
    r, g, b = B.split_channels(rgb, 'clip_linear')
    inside = _inside_cube(r, g, b)
    _log_slow_path('clip_linear', inside)

    clipped = _clip_linear_channels(r, g, b)
    return B.stack([B.where(inside, x, y) for x, y in zip((r, g, b), clipped)], axis=-1)


def clip_srgb(rgb: Array) -> Array:
    """Clip sRGB colors (..., 3) into the gamut, preserving hue.

    The result can overshoot [0, 1] by floating-point noise (~1e-6); apply
    a final np.clip if exact bounds are needed.
    """
    r, g, b = B.split_channels(rgb, 'clip_srgb')
    inside = _inside_cube(r, g, b)
    _log_slow_path('clip_srgb', inside)

    clipped = _clip_linear_channels(srgb_to_linear(r), srgb_to_linear(g), srgb_to_linear(b))
    clipped = [linear_to_srgb(x) for x in clipped]
    return B.stack([B.where(inside, x, y) for x, y in zip((r, g, b), clipped)], axis=-1)
