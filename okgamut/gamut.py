"""Gamut mapping for out-of-gamut OKLCH values.

Not all (L, C, H) combinations produce valid sRGB. High chroma at
extreme lightness is particularly problematic.

Strategies:
- clip: Hard-clip RGB to [0,1], fast but can shift hue/lightness
- chroma / compress: Reduce C until in-gamut, preserves L and H intent
- adaptive: Move toward a lightness-dependent focal point. Preserves H,
  trades a little L for much less chroma loss at the extremes
"""

import logging
from math import pi
from typing import Literal

from . import _backend as B
from ._backend import Array
from .basis import oklch_to_srgb, srgb_to_oklch
from .clip import clip_oklab
from .defaults import DEFAULT_GAMUT_TOLERANCE
from .intersect import find_gamut_intersection

logger = logging.getLogger(__name__)


def _lch(L: Array, C: Array, H: Array) -> Array:
    L = B.asarray(L)
    C, H = B.asarray_like(C, L), B.asarray_like(H, L)
    L, C, H = B.broadcast_arrays(L, C, H)
    return B.stack([L, C, H], axis=-1)


# === Gamut checking ===

def is_in_gamut(L: Array, C: Array, H: Array, tolerance: float = DEFAULT_GAMUT_TOLERANCE) -> Array:
    """Check if OKLCH values produce valid sRGB (all channels in [0,1])."""
    rgb = oklch_to_srgb(_lch(L, C, H))
    in_range = (rgb >= -tolerance) & (rgb <= 1 + tolerance)
    return B.all_along_axis(in_range, axis=-1)


# === Gamut mapping methods ===

def gamut_clip(L: Array, C: Array, H: Array) -> Array:
    """Convert to sRGB and hard-clip to [0,1].

    Fast but may distort colors (hue shifts, flattened gradients).

    Returns:
        RGB array (..., 3) with values clamped to [0,1]
    """
    rgb = oklch_to_srgb(_lch(L, C, H))
    return B.clip(rgb, 0.0, 1.0)


def max_chroma_for_lh(L: Array, H: Array) -> Array:
    """Maximum in-gamut chroma at lightness L and hue H (degrees).

    Intersects the constant-lightness ray from (L, 0) with the gamut
    boundary, so no search or lookup table is needed.
    """
    L = B.asarray(L)
    H = B.asarray_like(H, L)
    H_rad = H * (pi / 180)
    a_, b_ = B.cos(H_rad), B.sin(H_rad)
    return find_gamut_intersection(a_, b_, L, B.full_like(L, 1.0), L)


def gamut_compress(
    L: Array,
    C: Array,
    H: Array,
    method: Literal['clip', 'chroma', 'adaptive'] = 'chroma'
) -> tuple[Array, Array, Array]:
    """Bring out-of-gamut colors into sRGB gamut.

    Args:
        L, C, H: OKLCH values
        method: 'clip' for RGB clipping, 'chroma' for chroma reduction,
            'adaptive' for hue-preserving projection toward a focal lightness

    Returns:
        (L, C, H) tuple with adjusted values
    """
    if method == 'clip':
        lch = srgb_to_oklch(gamut_clip(L, C, H))
        return lch[..., 0], lch[..., 1], lch[..., 2] % 360

    elif method == 'chroma':
        max_C = max_chroma_for_lh(L, H)
        C = B.asarray_like(C, max_C)
        C_compressed = B.minimum(C, B.maximum(max_C, B.zeros_like(max_C)))
        return B.asarray_like(L, max_C), C_compressed, B.asarray_like(H, max_C)

    elif method == 'adaptive':
        lch = _lch(L, C, H)
        H_rad = lch[..., 2] * (pi / 180)
        lab = B.stack([lch[..., 0], lch[..., 1] * B.cos(H_rad), lch[..., 1] * B.sin(H_rad)], axis=-1)
        lab = clip_oklab(lab)
        C_clipped = B.sqrt(lab[..., 1] ** 2 + lab[..., 2] ** 2)
        # Clipping only scales chroma, so the hue is kept as given
        return lab[..., 0], C_clipped, lch[..., 2]

    raise ValueError(f"gamut_compress: Unknown gamut method: {method}")


def gamut_map_to_srgb(
    L: Array,
    C: Array,
    H: Array,
    method: Literal['clip', 'compress', 'adaptive'] = 'compress'
) -> Array:
    """Map OKLCH to sRGB with gamut handling.

    This is the main entry point for OKLCH -> sRGB conversion with gamut safety.

    Args:
        L: Lightness (0-1)
        C: Chroma (0-~0.4)
        H: Hue degrees (0-360)
        method: 'clip' for fast RGB clipping, 'compress' for chroma reduction,
            'adaptive' for adaptive focal-point clipping

    Returns:
        RGB array (..., 3) with values in [0, 1]
    """
    logger.debug("gamut_map_to_srgb: method=%s", method)

    if method == 'clip':
        return gamut_clip(L, C, H)

    elif method in ('compress', 'adaptive'):
        L_safe, C_safe, H_safe = gamut_compress(
            L, C, H, method='chroma' if method == 'compress' else 'adaptive'
        )
        rgb = oklch_to_srgb(_lch(L_safe, C_safe, H_safe))
        # Final clip for numerical safety
        return B.clip(rgb, 0.0, 1.0)

    raise ValueError(f"gamut_map_to_srgb: Unknown method: {method}")
