"""OKLab/OKLCH/OKHSV color conversions and hue-preserving sRGB gamut clipping.

This package provides:
- sRGB <-> linear sRGB <-> OKLab <-> OKLCH basis changes
- Gamut geometry per hue: max saturation, cusp, line/boundary intersection
- Adaptive gamut clipping of OKLab, linear sRGB and sRGB colors
- OKHSV <-> sRGB conversions
- OKLCH gamut mapping helpers and palette interpolation
- Backend-agnostic: works with numpy arrays or torch tensors

Colors are arrays with the three components on the last axis, so a single
color has shape (3,) and an image has shape (H, W, 3).

Example:
    import numpy as np
    from okgamut import clip_srgb, okhsv_to_srgb

    clip_srgb(np.array([1.0, 0.0, 1.5]))     # hue-preserving clip
    okhsv_to_srgb(np.array([0.1, 0.8, 0.9])) # orange from a color picker
"""

from .basis import (
    srgb_to_linear,
    linear_to_srgb,
    linear_to_oklab,
    oklab_to_linear,
    lab_to_lch,
    lch_to_lab,
    srgb_to_oklab,
    oklab_to_srgb,
    srgb_to_oklch,
    oklch_to_srgb,
    oklab_to_linear_rgb,
    linear_rgb_to_oklab,
)

from .saturation import ClippingChannel, compute_max_saturation, select_clipping_channel
from .cusp import find_cusp, cusp_to_st
from .intersect import find_gamut_intersection
from .clip import clip_oklab, clip_linear, clip_srgb, adaptive_focal_lightness
from .okhsv import toe, toe_inv, okhsv_to_srgb, srgb_to_okhsv, hsv_to_rgb, rgb_to_hsv

from .gamut import (
    is_in_gamut,
    gamut_clip,
    gamut_compress,
    gamut_map_to_srgb,
    max_chroma_for_lh,
)

from .palette import interpolate_oklch, build_oklch_lut

__all__ = [
    # Basis changes
    'srgb_to_linear',
    'linear_to_srgb',
    'linear_to_oklab',
    'oklab_to_linear',
    'lab_to_lch',
    'lch_to_lab',
    'srgb_to_oklab',
    'oklab_to_srgb',
    'srgb_to_oklch',
    'oklch_to_srgb',
    'oklab_to_linear_rgb',
    'linear_rgb_to_oklab',
    # Gamut geometry
    'ClippingChannel',
    'compute_max_saturation',
    'select_clipping_channel',
    'find_cusp',
    'cusp_to_st',
    'find_gamut_intersection',
    # Clipping
    'clip_oklab',
    'clip_linear',
    'clip_srgb',
    'adaptive_focal_lightness',
    # OKHSV
    'toe',
    'toe_inv',
    'okhsv_to_srgb',
    'srgb_to_okhsv',
    'hsv_to_rgb',
    'rgb_to_hsv',
    # Gamut mapping
    'is_in_gamut',
    'gamut_clip',
    'gamut_compress',
    'gamut_map_to_srgb',
    'max_chroma_for_lh',
    # Palettes
    'interpolate_oklch',
    'build_oklch_lut',
]
