"""Fixed basis changes between sRGB, linear sRGB, OKLab and OKLCh.

Reference: https://bottosson.github.io/posts/oklab/

All functions accept numpy arrays or torch tensors. Array-level functions
take colors with the three components on the last axis, shape (..., 3).
Nothing here clips or validates ranges: out-of-range values pass through.
"""

from math import pi
from . import _backend as B
from ._backend import Array
from .defaults import (
    SRGB_DECODE_THRESHOLD,
    SRGB_ENCODE_THRESHOLD,
    SRGB_LINEAR_SLOPE,
    SRGB_SCALE,
    SRGB_OFFSET,
    SRGB_GAMMA,
)

# === OKLab <-> Linear RGB matrices ===
# From Björn Ottosson's reference implementation

# Linear RGB -> LMS
RGB_TO_LMS = (
    (0.4122214708, 0.5363325363, 0.0514459929),
    (0.2119034982, 0.6806995451, 0.1073969566),
    (0.0883024619, 0.2817188376, 0.6299787005),
)

# LMS cube root -> OKLab
LMS_TO_OKLAB = (
    (0.2104542553, 0.7936177850, -0.0040720468),
    (1.9779984951, -2.4285922050, 0.4505937099),
    (0.0259040371, 0.7827717662, -0.8086757660),
)

# OKLab -> LMS cube root
OKLAB_TO_LMS = (
    (1.0, 0.3963377774, 0.2158037573),
    (1.0, -0.1055613458, -0.0638541728),
    (1.0, -0.0894841775, -1.2914855480),
)

# LMS -> Linear RGB. Each row is the weight vector of one output channel.
LMS_TO_RGB = (
    (+4.0767416621, -3.3077115913, +0.2309699292),
    (-1.2684380046, +2.6097574011, -0.3413193965),
    (-0.0041960863, -0.7034186147, +1.7076147010),
)


# === Channel-level conversions ===

def oklab_to_lms_cbrt(L: Array, a: Array, b: Array) -> tuple[Array, Array, Array]:
    """OKLab -> cube-root LMS (l', m', s')."""
    l_ = L + OKLAB_TO_LMS[0][1] * a + OKLAB_TO_LMS[0][2] * b
    m_ = L + OKLAB_TO_LMS[1][1] * a + OKLAB_TO_LMS[1][2] * b
    s_ = L + OKLAB_TO_LMS[2][1] * a + OKLAB_TO_LMS[2][2] * b
    return l_, m_, s_


def lms_to_linear_rgb(l: Array, m: Array, s: Array) -> tuple[Array, Array, Array]:
    """LMS -> Linear RGB."""
    r = LMS_TO_RGB[0][0]*l + LMS_TO_RGB[0][1]*m + LMS_TO_RGB[0][2]*s
    g = LMS_TO_RGB[1][0]*l + LMS_TO_RGB[1][1]*m + LMS_TO_RGB[1][2]*s
    b = LMS_TO_RGB[2][0]*l + LMS_TO_RGB[2][1]*m + LMS_TO_RGB[2][2]*s
    return r, g, b


def oklab_to_linear_rgb(L: Array, a: Array, b: Array) -> tuple[Array, Array, Array]:
    """OKLab -> Linear RGB via LMS intermediate."""
    l_, m_, s_ = oklab_to_lms_cbrt(L, a, b)
    return lms_to_linear_rgb(l_ * l_ * l_, m_ * m_ * m_, s_ * s_ * s_)


def linear_rgb_to_oklab(r: Array, g: Array, b: Array) -> tuple[Array, Array, Array]:
    """Linear RGB -> OKLab via LMS intermediate."""
    l = RGB_TO_LMS[0][0]*r + RGB_TO_LMS[0][1]*g + RGB_TO_LMS[0][2]*b
    m = RGB_TO_LMS[1][0]*r + RGB_TO_LMS[1][1]*g + RGB_TO_LMS[1][2]*b
    s = RGB_TO_LMS[2][0]*r + RGB_TO_LMS[2][1]*g + RGB_TO_LMS[2][2]*b

    # Cube root (sign-preserving for edge cases)
    l_, m_, s_ = B.cbrt(l), B.cbrt(m), B.cbrt(s)

    L = LMS_TO_OKLAB[0][0]*l_ + LMS_TO_OKLAB[0][1]*m_ + LMS_TO_OKLAB[0][2]*s_
    a = LMS_TO_OKLAB[1][0]*l_ + LMS_TO_OKLAB[1][1]*m_ + LMS_TO_OKLAB[1][2]*s_
    b = LMS_TO_OKLAB[2][0]*l_ + LMS_TO_OKLAB[2][1]*m_ + LMS_TO_OKLAB[2][2]*s_

    return L, a, b


# === Transfer function ===

def linear_to_srgb(x: Array) -> Array:
    """Linear RGB -> sRGB gamma encoding (elementwise)."""
    x = B.asarray(x)
    low = x * SRGB_LINEAR_SLOPE
    high = SRGB_SCALE * B.pow(B.maximum(x, B.zeros_like(x)), 1 / SRGB_GAMMA) - SRGB_OFFSET
    return B.where(x >= SRGB_ENCODE_THRESHOLD, high, low)


def srgb_to_linear(x: Array) -> Array:
    """sRGB -> Linear RGB gamma decoding (elementwise)."""
    x = B.asarray(x)
    low = x / SRGB_LINEAR_SLOPE
    high = B.pow(B.maximum((x + SRGB_OFFSET) / SRGB_SCALE, B.zeros_like(x)), SRGB_GAMMA)
    return B.where(x >= SRGB_DECODE_THRESHOLD, high, low)


# === Array-level conversions ===

def linear_to_oklab(rgb: Array) -> Array:
    """Linear sRGB (..., 3) -> OKLab (..., 3)."""
    r, g, b = B.split_channels(rgb, 'linear_to_oklab')
    return B.stack(list(linear_rgb_to_oklab(r, g, b)), axis=-1)


def oklab_to_linear(lab: Array) -> Array:
    """OKLab (..., 3) -> Linear sRGB (..., 3)."""
    L, a, b = B.split_channels(lab, 'oklab_to_linear')
    return B.stack(list(oklab_to_linear_rgb(L, a, b)), axis=-1)


def lab_to_lch(lab: Array) -> Array:
    """OKLab -> OKLCh. Hue in degrees, as returned by atan2 (-180, 180]."""
    L, a, b = B.split_channels(lab, 'lab_to_lch')
    C = B.sqrt(a * a + b * b)
    H = B.atan2(b, a) * (180 / pi)
    return B.stack([L, C, H], axis=-1)


def lch_to_lab(lch: Array) -> Array:
    """OKLCh -> OKLab. Any real hue in degrees is accepted."""
    L, C, H = B.split_channels(lch, 'lch_to_lab')
    H_rad = H * (pi / 180)
    return B.stack([L, C * B.cos(H_rad), C * B.sin(H_rad)], axis=-1)


# === Convenience Composites ===

def srgb_to_oklab(rgb: Array) -> Array:
    """sRGB -> OKLab in one call."""
    return linear_to_oklab(srgb_to_linear(rgb))


def oklab_to_srgb(lab: Array) -> Array:
    """OKLab -> sRGB in one call. Values may leave [0, 1] if out of gamut."""
    return linear_to_srgb(oklab_to_linear(lab))


def srgb_to_oklch(rgb: Array) -> Array:
    """sRGB -> OKLCh.

    Args:
        rgb: RGB array with shape (..., 3), values in [0,1]

    Returns:
        LCh array with shape (..., 3), hue in degrees
    """
    return lab_to_lch(srgb_to_oklab(rgb))


def oklch_to_srgb(lch: Array) -> Array:
    """OKLCh -> sRGB.

    Args:
        lch: LCh array with shape (..., 3): lightness (0-1), chroma (0-~0.4),
            hue in degrees

    Returns:
        RGB array with shape (..., 3), values may be outside [0,1] if out of gamut
    """
    return oklab_to_srgb(lch_to_lab(lch))
