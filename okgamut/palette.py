"""OKLCH palette interpolation and LUT generation.

Stops are dicts with keys "pos" (0-1), "L", "C" and "H" (degrees). With
relative_chroma=True, "C" is a fraction of the maximum in-gamut chroma at
the stop's lightness and hue, so a palette keeps its vividness as it moves
through hues with very different gamut extents.
"""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from .defaults import DEFAULT_LUT_SIZE
from .gamut import max_chroma_for_lh, gamut_map_to_srgb

logger = logging.getLogger(__name__)


def _sorted_stops(stops: Iterable[dict]) -> list[dict]:
    coerced = [{key: float(stop[key]) for key in ("pos", "L", "C", "H")} for stop in stops]
    return sorted(coerced, key=lambda s: s["pos"])


def _max_chroma(L, H) -> np.ndarray:
    return np.maximum(max_chroma_for_lh(L, H), 0.0)


def _chroma_abs_to_rel(L, H, C_abs) -> np.ndarray:
    max_c = _max_chroma(L, H)
    with np.errstate(divide='ignore', invalid='ignore'):
        rel = np.where(max_c <= 0.0, 0.0, C_abs / max_c)
    return np.clip(rel, 0.0, 1.0)


def _stop_chroma(stop: dict, relative_chroma: bool) -> tuple[float, float]:
    """(relative, absolute) chroma of a stop."""
    if relative_chroma:
        c_rel = float(stop["C"])
        return c_rel, float(np.clip(c_rel, 0.0, 1.0) * _max_chroma(stop["L"], stop["H"]))
    c_abs = float(stop["C"])
    return float(_chroma_abs_to_rel(stop["L"], stop["H"], c_abs)), c_abs


def _hue_delta(h0: np.ndarray, h1: np.ndarray) -> np.ndarray:
    """Signed hue step along the shorter arc."""
    dh = h1 - h0
    return np.where(dh > 180, dh - 360, np.where(dh < -180, dh + 360, dh))


def _blend(stops: list[dict], positions: np.ndarray, relative_chroma: bool, interp_mix: float):
    """L, absolute C and H at each position.

    Positions outside the stop range hold the end stops. Where stops share a
    position the later one wins. Chroma is blended between interpolating
    absolute chroma (interp_mix=0) and relative chroma (interp_mix=1).
    """
    pos = np.array([s["pos"] for s in stops])
    L = np.array([s["L"] for s in stops])
    H = np.array([s["H"] for s in stops])
    c_rel, c_abs = np.array([_stop_chroma(s, relative_chroma) for s in stops]).T

    if len(stops) == 1:
        seg = np.zeros(positions.shape, dtype=np.intp)
        nxt, frac = seg, np.zeros(positions.shape)
    else:
        x = np.clip(positions, pos[0], pos[-1])
        seg = np.clip(np.searchsorted(pos, x, side='right') - 1, 0, len(stops) - 2)
        nxt = seg + 1
        span = pos[nxt] - pos[seg]
        with np.errstate(divide='ignore', invalid='ignore'):
            frac = np.where(span > 0, (x - pos[seg]) / span, 1.0)

    def lerp(values):
        return values[seg] + frac * (values[nxt] - values[seg])

    L_out = lerp(L)
    H_out = (H[seg] + frac * _hue_delta(H[seg], H[nxt])) % 360

    mix = float(np.clip(interp_mix, 0.0, 1.0))
    C_from_rel = np.clip(lerp(c_rel), 0.0, 1.0) * _max_chroma(L_out, H_out)
    C_out = np.clip((1.0 - mix) * lerp(c_abs) + mix * C_from_rel, 0.0, None)
    return L_out, C_out, H_out


def interpolate_oklch(
    stops: Iterable[dict],
    t: float,
    relative_chroma: bool = True,
    interp_mix: float = 1.0,
) -> tuple[float, float, float]:
    """Interpolate OKLCH stops at position t in [0, 1].

    Hue takes the shorter way around the circle. At or beyond the end stops
    the stop itself is returned untouched. The returned C is relative or
    absolute, matching relative_chroma.
    """
    stops_sorted = _sorted_stops(stops)
    if not stops_sorted:
        return (0.5, 0.0, 0.0)

    t = float(np.clip(t, 0.0, 1.0))
    first, last = stops_sorted[0], stops_sorted[-1]
    if len(stops_sorted) == 1 or t <= first["pos"]:
        return (first["L"], first["C"], first["H"])
    if t >= last["pos"]:
        return (last["L"], last["C"], last["H"])

    L, C, H = _blend(stops_sorted, np.array([t]), relative_chroma, interp_mix)
    if relative_chroma:
        C = _chroma_abs_to_rel(L, H, C)
    return (float(L[0]), float(C[0]), float(H[0]))


def build_oklch_lut(
    stops: Iterable[dict],
    size: int = DEFAULT_LUT_SIZE,
    relative_chroma: bool = True,
    interp_mix: float = 1.0,
) -> np.ndarray:
    """Build a (size, 3) float32 sRGB LUT from OKLCH stops."""
    if size <= 0:
        raise ValueError(f"build_oklch_lut: LUT size must be positive, got {size}")

    stops_sorted = _sorted_stops(stops)
    logger.debug("build_oklch_lut: %d stops, size=%d", len(stops_sorted), size)
    if not stops_sorted:
        return np.zeros((size, 3), dtype=np.float32)

    L, C, H = _blend(stops_sorted, np.linspace(0.0, 1.0, size), relative_chroma, interp_mix)
    rgb = gamut_map_to_srgb(L, C, H, method="compress")
    return np.clip(rgb, 0.0, 1.0).astype(np.float32, copy=False)
