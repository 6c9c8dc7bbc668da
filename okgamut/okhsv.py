"""OKHSV <-> sRGB conversions.

Reference: https://bottosson.github.io/posts/colorpicker/
Adapted from MIT-licensed code, Copyright (c) 2021 Björn Ottosson. See NOTICE.

OKHSV is an HSV-like cylinder built on OKLab. For each hue the sRGB gamut
is approximated by a triangle between black, white and the cusp; value
scales from black and saturation sweeps from the gray axis to the outer
edge. A toe curve remaps lightness so that value behaves more like
perceived lightness near black, and a final rescale accounts for the
curved upper edge of the real gamut.

Hue is in turns [0, 1), saturation and value in [0, 1]. Values outside
those ranges are extrapolated, not rejected.
"""

from math import pi

from . import _backend as B
from ._backend import Array
from .basis import oklab_to_linear_rgb, linear_rgb_to_oklab, linear_to_srgb, srgb_to_linear
from .cusp import find_cusp, cusp_to_st, max_channel
from .defaults import OKHSV_S0, TOE_K1, TOE_K2, TOE_K3, ACHROMATIC_EPSILON


def toe(x: Array) -> Array:
    """Map OKLab lightness to a lightness estimate closer to CIELab L*."""
    y = TOE_K3 * x - TOE_K1
    return 0.5 * (y + B.sqrt(y * y + 4 * TOE_K2 * TOE_K3 * x))


def toe_inv(x: Array) -> Array:
    """Inverse of toe()."""
    return (x * x + TOE_K1 * x) / (TOE_K3 * (x + TOE_K2))


def _boundary_scale(L_vt: Array, C_vt: Array, a_: Array, b_: Array) -> Array:
    """Lightness scale that moves the triangle edge onto the curved gamut edge."""
    r, g, b = oklab_to_linear_rgb(L_vt, a_ * C_vt, b_ * C_vt)
    brightest = B.maximum(max_channel(r, g, b), B.zeros_like(r))
    return B.pow(1 / brightest, 1 / 3)


def _hue_triangle(a_: Array, b_: Array) -> tuple[Array, Array]:
    """(T_max, k) of the gamut triangle for unit hue (a_, b_)."""
    S_max, T_max = cusp_to_st(*find_cusp(a_, b_))
    k = 1 - OKHSV_S0 / S_max
    return T_max, k


def okhsv_to_srgb(hsv: Array) -> Array:
    """Convert OKHSV (..., 3) to sRGB (..., 3).

    Zero value is black for every hue and saturation.
    """
    h, s, v = B.split_channels(hsv, 'okhsv_to_srgb')

    a_ = B.cos(2 * pi * h)
    b_ = B.sin(2 * pi * h)
    T_max, k = _hue_triangle(a_, b_)
    S_0 = OKHSV_S0

    with B.errstate():
        # L, C when v == 1, as if the gamut were a perfect triangle
        denom = S_0 + T_max - T_max * k * s
        L_v = 1 - s * S_0 / denom
        C_v = s * T_max * S_0 / denom

        L = v * L_v
        C = v * C_v

        # Compensate for the toe and the curved top part of the triangle
        L_vt = toe_inv(L_v)
        C_vt = C_v * L_vt / L_v

        L_new = toe_inv(L)
        C = B.where(L == 0, B.zeros_like(C), C * L_new / L)
        L = L_new

        scale_L = _boundary_scale(L_vt, C_vt, a_, b_)
        L = L * scale_L
        C = C * scale_L

    r, g, b = oklab_to_linear_rgb(L, C * a_, C * b_)
    return linear_to_srgb(B.stack([r, g, b], axis=-1))


def srgb_to_okhsv(rgb: Array) -> Array:
    """Convert sRGB (..., 3) to OKHSV (..., 3).

    Achromatic colors (chroma <= 1e-12) have no hue; they map to
    (0, 0, toe(L)), which okhsv_to_srgb sends back to the same gray.
    """
    r, g, b = B.split_channels(rgb, 'srgb_to_okhsv')
    L, a, b_lab = linear_rgb_to_oklab(srgb_to_linear(r), srgb_to_linear(g), srgb_to_linear(b))
    L_in = L

    C = B.sqrt(a * a + b_lab * b_lab)
    achromatic = C <= ACHROMATIC_EPSILON
    safe_C = B.where(achromatic, B.full_like(C, 1.0), C)
    a_ = B.where(achromatic, B.full_like(C, 1.0), a / safe_C)
    b_ = B.where(achromatic, B.zeros_like(C), b_lab / safe_C)

    h = 0.5 + 0.5 * B.atan2(-b_lab, -a) / pi

    T_max, k = _hue_triangle(a_, b_)
    S_0 = OKHSV_S0

    with B.errstate():
        # Find L_v, C_v, L_vt and C_vt
        t = T_max / (C + L * T_max)
        L_v = t * L
        C_v = t * C

        L_vt = toe_inv(L_v)
        C_vt = C_v * L_vt / L_v

        # Invert the step that compensates for the toe and the curved top of the triangle
        scale_L = _boundary_scale(L_vt, C_vt, a_, b_)
        L = L / scale_L
        C = C / scale_L

        C = C * toe(L) / L
        L = toe(L)

        v = L / L_v
        s = (S_0 + T_max) * C_v / ((T_max * S_0) + T_max * k * C_v)

    zero = B.zeros_like(L)
    h = B.where(achromatic, zero, h)
    s = B.where(achromatic, zero, s)
    v = B.where(achromatic, toe(L_in), v)
    return B.stack([h, s, v], axis=-1)


hsv_to_rgb = okhsv_to_srgb
rgb_to_hsv = srgb_to_okhsv
