"""Tests for OKHSV <-> sRGB conversions."""

import numpy as np
import pytest

from okgamut import (
    toe,
    toe_inv,
    okhsv_to_srgb,
    srgb_to_okhsv,
    hsv_to_rgb,
    rgb_to_hsv,
    srgb_to_oklab,
)


def _hue_distance(h0, h1):
    d = np.abs(h0 - h1) % 1.0
    return np.minimum(d, 1.0 - d)


class TestToe:
    """Test the lightness toe curve."""

    def test_inverse(self):
        x = np.linspace(0, 1, 101)
        np.testing.assert_allclose(toe_inv(toe(x)), x, atol=1e-9)
        np.testing.assert_allclose(toe(toe_inv(x)), x, atol=1e-9)

    def test_fixed_endpoints(self):
        np.testing.assert_allclose(toe(np.array([0.0, 1.0])), [0.0, 1.0], atol=1e-12)

    def test_monotonic(self):
        y = toe(np.linspace(0, 1, 101))
        assert np.all(np.diff(y) > 0)

    def test_darkens_shadows(self):
        """The toe pulls dark lightness values down."""
        assert toe(0.2) < 0.2


class TestOkhsvToSrgb:
    """Test okhsv_to_srgb."""

    def test_white(self):
        """Full value with no saturation is white for every hue."""
        h = np.linspace(0, 1, 12, endpoint=False)
        hsv = np.stack([h, np.zeros_like(h), np.ones_like(h)], axis=-1)
        np.testing.assert_allclose(okhsv_to_srgb(hsv), 1.0, atol=1e-3)

    def test_black(self):
        """Zero value is black regardless of hue and saturation."""
        hsv = np.array([[0.0, 0.0, 0.0], [0.3, 0.7, 0.0], [0.8, 1.0, 0.0]])
        np.testing.assert_allclose(okhsv_to_srgb(hsv), 0.0, atol=1e-6)

    def test_full_saturation_is_in_gamut(self):
        h = np.linspace(0, 1, 36, endpoint=False)
        hsv = np.stack([h, np.ones_like(h), np.ones_like(h)], axis=-1)
        rgb = okhsv_to_srgb(hsv)
        assert np.all(rgb > -1e-2)
        assert np.all(rgb < 1 + 1e-2)

    def test_primary_at_corner(self):
        """Red at full saturation and value is the red primary."""
        lab = srgb_to_oklab(np.array([1.0, 0.0, 0.0]))
        h = 0.5 + 0.5 * np.arctan2(-lab[2], -lab[1]) / np.pi
        rgb = okhsv_to_srgb(np.array([h, 1.0, 1.0]))
        np.testing.assert_allclose(rgb, [1.0, 0.0, 0.0], atol=1e-3)

    def test_wrong_shape(self):
        with pytest.raises(ValueError, match="okhsv_to_srgb"):
            okhsv_to_srgb(np.zeros(4))


class TestSrgbToOkhsv:
    """Test srgb_to_okhsv."""

    def test_red(self):
        hsv = srgb_to_okhsv(np.array([1.0, 0.0, 0.0]))
        assert hsv[1] == pytest.approx(1.0, abs=1e-3)
        assert hsv[2] == pytest.approx(1.0, abs=1e-3)

    def test_black(self):
        np.testing.assert_allclose(srgb_to_okhsv(np.array([0.0, 0.0, 0.0])), 0.0, atol=1e-12)

    def test_white(self):
        hsv = srgb_to_okhsv(np.array([1.0, 1.0, 1.0]))
        assert hsv[1] < 1e-4
        assert hsv[2] == pytest.approx(1.0, abs=1e-4)

    def test_achromatic_has_no_hue(self):
        """Exactly achromatic colors map to (0, 0, toe(L))."""
        hsv = srgb_to_okhsv(np.zeros((2, 3)))
        assert np.all(np.isfinite(hsv))
        np.testing.assert_array_equal(hsv[:, :2], 0.0)

    def test_hue_range(self):
        rng = np.random.default_rng(3)
        hsv = srgb_to_okhsv(rng.random((200, 3)))
        assert np.all((hsv[:, 0] >= 0) & (hsv[:, 0] <= 1))


class TestRoundTrip:
    """OKHSV -> sRGB -> OKHSV round trips."""

    def test_hsv_roundtrip(self):
        rng = np.random.default_rng(42)
        hsv = np.stack([
            rng.random(500),
            rng.uniform(0.01, 1.0, 500),
            rng.uniform(0.01, 1.0, 500),
        ], axis=-1)
        back = srgb_to_okhsv(okhsv_to_srgb(hsv))
        assert np.all(_hue_distance(back[:, 0], hsv[:, 0]) < 1e-4)
        np.testing.assert_allclose(back[:, 1:], hsv[:, 1:], atol=1e-4)

    def test_srgb_roundtrip(self):
        rng = np.random.default_rng(42)
        colors = rng.uniform(0.01, 1.0, (500, 3))
        np.testing.assert_allclose(okhsv_to_srgb(srgb_to_okhsv(colors)), colors, atol=1e-4)

    def test_aliases(self):
        hsv = np.array([0.6, 0.5, 0.7])
        np.testing.assert_array_equal(hsv_to_rgb(hsv), okhsv_to_srgb(hsv))
        rgb = np.array([0.2, 0.5, 0.3])
        np.testing.assert_array_equal(rgb_to_hsv(rgb), srgb_to_okhsv(rgb))


class TestTorchParity:
    """numpy and torch backends agree."""

    def test_okhsv_to_srgb(self):
        torch = pytest.importorskip('torch')
        rng = np.random.default_rng(0)
        hsv = rng.random((50, 3))
        expected = okhsv_to_srgb(hsv)
        actual = okhsv_to_srgb(torch.from_numpy(hsv))
        np.testing.assert_allclose(actual.numpy(), expected, atol=1e-9)
