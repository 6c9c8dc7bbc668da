"""Central place for okgamut numeric constants."""

# sRGB transfer function (IEC 61966-2-1)
SRGB_DECODE_THRESHOLD: float = 0.04045
SRGB_ENCODE_THRESHOLD: float = 0.0031308
SRGB_LINEAR_SLOPE: float = 12.92
SRGB_SCALE: float = 1.055
SRGB_OFFSET: float = 0.055
SRGB_GAMMA: float = 2.4

# Gamut clipping
CLIP_CHROMA_EPSILON: float = 1e-5  # chroma floor before normalizing the hue direction
CLIP_ALPHA: float = 0.05  # how strongly chroma pulls the focal point toward the extremes
CLIP_L0_BASE: float = 0.5  # focal lightness around mid gray

# OKHSV
OKHSV_S0: float = 0.5
TOE_K1: float = 0.206
TOE_K2: float = 0.03
TOE_K3: float = (1.0 + TOE_K1) / (1.0 + TOE_K2)
ACHROMATIC_EPSILON: float = 1e-12  # below this chroma a color has no usable hue

# Gamut utilities
DEFAULT_GAMUT_TOLERANCE: float = 1e-4
DEFAULT_LUT_SIZE: int = 256
