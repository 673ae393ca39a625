# renderer/tone_mapping.py
import numpy as np

def gamma_tone_mapping(radiance: np.ndarray, gamma: float = 2.2) -> np.ndarray:
    """
    Map linear radiance to 8-bit display values: c ** (1 / gamma), clamped
    to [0, 1] and scaled by 255.99 before truncation.
    """
    if gamma <= 0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    linear = np.maximum(np.asarray(radiance, dtype=np.float64), 0.0)
    mapped = linear ** (1.0 / gamma)
    output = (np.clip(mapped, 0.0, 1.0) * 255.99).astype(np.uint8)
    return output

def encode_color(color, gamma: float = 2.2) -> tuple:
    """8-bit encoding of a single linear RGB triple."""
    return tuple(int(c) for c in gamma_tone_mapping(np.array(tuple(color)), gamma))
