"""Tests for adaptive hue-preserving gamut clipping."""

import logging

import numpy as np
import pytest

from okgamut import (
    adaptive_focal_lightness,
    clip_linear,
    clip_oklab,
    clip_srgb,
    lab_to_lch,
    oklab_to_linear,
    srgb_to_oklch,
)


OUT_OF_GAMUT_SRGB = np.array([
    [2.0, 0.0, 0.0],
    [0.0, 2.0, 0.0],
    [0.0, 0.0, 2.0],
    [1.0, 0.0, 1.5],
    [-0.3, 0.5, 0.8],
    [1.2, 1.1, -0.1],
])

OUT_OF_GAMUT_OKLAB = np.array([
    [0.7, 0.3, 0.1],
    [0.2, -0.1, -0.2],
    [0.95, 0.0, 0.2],
    [0.5, 0.4, 0.0],
    [0.05, 0.1, 0.1],
])


class TestFocalLightness:
    """Test adaptive_focal_lightness."""

    def test_mid_gray(self):
        assert adaptive_focal_lightness(0.5, 0.3) == pytest.approx(0.5)

    def test_achromatic_keeps_lightness(self):
        """With no chroma the focal point is the color itself."""
        L = np.linspace(0, 1, 11)
        np.testing.assert_allclose(adaptive_focal_lightness(L, np.zeros_like(L)), L, atol=1e-12)

    def test_chroma_pulls_toward_mid(self):
        """More chroma moves the focal point toward 0.5."""
        L = np.array([0.1, 0.9])
        low = adaptive_focal_lightness(L, np.full(2, 0.01))
        high = adaptive_focal_lightness(L, np.full(2, 0.4))
        assert np.all(np.abs(high - 0.5) < np.abs(low - 0.5))
        assert np.all(np.abs(low - 0.5) <= np.abs(L - 0.5))


class TestClipSrgb:
    """Test clip_srgb."""

    def test_in_gamut_unchanged(self):
        """Colors inside the cube come back bit-for-bit."""
        rng = np.random.default_rng(42)
        colors = rng.uniform(0.001, 0.999, (1000, 3))
        np.testing.assert_array_equal(clip_srgb(colors), colors)

    def test_idempotent(self):
        rng = np.random.default_rng(42)
        colors = np.concatenate([rng.uniform(0.001, 0.999, (100, 3)), np.eye(3), [[0.0, 0.0, 0.0]]])
        once = clip_srgb(colors)
        np.testing.assert_array_equal(clip_srgb(once), once)

    def test_cube_faces_unchanged(self):
        """Black, white and the primaries sit on the cube and are kept exactly."""
        colors = np.array([
            [0.0, 0.0, 0.0],
            [1.0, 1.0, 1.0],
            [1.0, 0.0, 0.0],
            [0.0, 1.0, 0.5],
        ])
        np.testing.assert_array_equal(clip_srgb(colors), colors)

    def test_achromatic_out_of_range(self):
        """Grays beyond black or white clip to black or white."""
        clipped = clip_srgb(np.array([[-1.0, -1.0, -1.0], [2.0, 2.0, 2.0]]))
        assert np.all(np.isfinite(clipped))
        np.testing.assert_allclose(clipped, [[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]], atol=1e-4)

    def test_out_of_gamut_lands_in_range(self):
        clipped = clip_srgb(OUT_OF_GAMUT_SRGB)
        assert np.all(np.isfinite(clipped))
        assert np.all(clipped >= -1e-4)
        assert np.all(clipped <= 1 + 1e-4)

    def test_preserves_hue(self):
        """Clipping moves colors within their own hue plane."""
        clipped = clip_srgb(np.array([1.0, 0.0, 1.5]))
        np.testing.assert_allclose(
            srgb_to_oklch(clipped)[2], srgb_to_oklch(np.array([1.0, 0.0, 1.5]))[2], atol=1e-6
        )

    def test_mixed_batch(self):
        """In-gamut entries of a batch are untouched by their neighbours."""
        colors = np.array([[0.2, 0.4, 0.6], [2.0, 0.0, 0.0]])
        clipped = clip_srgb(colors)
        np.testing.assert_array_equal(clipped[0], colors[0])
        assert not np.allclose(clipped[1], colors[1])

    def test_image_shape(self):
        img = np.full((8, 8, 3), 1.5)
        assert clip_srgb(img).shape == (8, 8, 3)

    def test_wrong_shape(self):
        with pytest.raises(ValueError, match="clip_srgb"):
            clip_srgb(np.zeros((4, 2)))

    def test_logs_clipped_count(self, caplog):
        colors = np.array([[0.2, 0.4, 0.6], [2.0, 0.0, 0.0]])
        with caplog.at_level(logging.DEBUG, logger="okgamut.clip"):
            clip_srgb(colors)
        assert "clipping 1 of 2 colors" in caplog.text


class TestClipLinear:
    """Test clip_linear."""

    def test_in_gamut_unchanged(self):
        colors = np.array([[0.5, 0.5, 0.5], [0.01, 0.9, 0.3]])
        np.testing.assert_array_equal(clip_linear(colors), colors)

    def test_black_unchanged(self):
        np.testing.assert_array_equal(clip_linear(np.zeros(3)), np.zeros(3))

    def test_out_of_gamut_lands_in_range(self):
        clipped = clip_linear(np.array([[1.5, -0.2, 0.3], [4.0, 4.0, 0.0], [-0.5, -0.5, -0.5]]))
        assert np.all(clipped >= -1e-4)
        assert np.all(clipped <= 1 + 1e-4)


class TestClipOklab:
    """Test clip_oklab."""

    def test_in_gamut_unchanged(self):
        lab = np.array([[0.5, 0.0, 0.0], [0.7, 0.05, -0.05]])
        np.testing.assert_array_equal(clip_oklab(lab), lab)

    def test_achromatic(self):
        """Colors with no chroma clip along the gray axis without NaNs."""
        lab = np.array([[1.2, 0.0, 0.0], [-0.1, 0.0, 0.0], [0.0, 0.0, 0.0]])
        clipped = clip_oklab(lab)
        assert np.all(np.isfinite(clipped))
        expected = [[1.0, 0.0, 0.0], [0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]
        np.testing.assert_allclose(clipped, expected, atol=1e-4)
        np.testing.assert_array_equal(clipped[2], lab[2])

    def test_result_in_gamut(self):
        rgb = oklab_to_linear(clip_oklab(OUT_OF_GAMUT_OKLAB))
        assert np.all(rgb >= -1e-4)
        assert np.all(rgb <= 1 + 1e-4)

    def test_hue_exact(self):
        before = lab_to_lch(OUT_OF_GAMUT_OKLAB)
        after = lab_to_lch(clip_oklab(OUT_OF_GAMUT_OKLAB))
        np.testing.assert_allclose(after[:, 2], before[:, 2], atol=1e-9)

    def test_chroma_not_increased(self):
        before = lab_to_lch(OUT_OF_GAMUT_OKLAB)
        after = lab_to_lch(clip_oklab(OUT_OF_GAMUT_OKLAB))
        assert np.all(after[:, 1] <= before[:, 1] + 1e-12)


class TestTorchParity:
    """numpy and torch backends agree."""

    def test_clip_srgb(self):
        torch = pytest.importorskip('torch')
        colors = np.concatenate([OUT_OF_GAMUT_SRGB, [[0.3, 0.6, 0.9]]])
        expected = clip_srgb(colors)
        actual = clip_srgb(torch.from_numpy(colors))
        assert isinstance(actual, torch.Tensor)
        np.testing.assert_allclose(actual.numpy(), expected, atol=1e-9)

    def test_clip_oklab(self):
        torch = pytest.importorskip('torch')
        expected = clip_oklab(OUT_OF_GAMUT_OKLAB)
        actual = clip_oklab(torch.from_numpy(OUT_OF_GAMUT_OKLAB))
        np.testing.assert_allclose(actual.numpy(), expected, atol=1e-9)
