import numpy as np

# Rays whose direction is closer than this to parallel with a plane miss it.
PLANE_EPSILON = 1e-6
# Offset along the normal (and minimum t) for shadow rays.
SHADOW_BIAS = 1e-3
GAMMA = 2.2

DEFAULT_WIDTH = 512
DEFAULT_HEIGHT = 512


def vec(list):
    """Handy shorthand to make a single-precision float array."""
    return np.array(list, dtype=np.float32)

def normalize(v):
    """Return a unit vector in the direction of the vector v."""
    return v / np.linalg.norm(v)

def clamp(v, lo=0.0, hi=1.0):
    """Clamp every component of v into [lo, hi]."""
    return np.clip(v, lo, hi)


def gamma_correct(color, gamma=GAMMA):
    """Map linear light values to display values, channel by channel.

    No clamping happens here: values outside [0, 1] pass through the power
    curve as they are.
    """
    return np.power(color, 1.0 / gamma)

def to_uint8(img):
    """Quantize an already gamma-corrected float image to 8 bits."""
    return np.clip(np.round(255.0 * clamp(img)), 0, 255).astype(np.uint8)
