# materials/presets.py
from core.vector import Vector3
from materials.material import Material

class MetalPresets:
    """Metals; roughness controls how blurry reflections are."""

    @staticmethod
    def tinted(color: Vector3, roughness: float = 0.2) -> Material:
        return Material(color, metalness=1.0, roughness=roughness)

class LightPresets:
    """Emissive materials. Lights still reflect light hitting them."""

    @staticmethod
    def white_light(intensity: float = 10.0) -> Material:
        white = Vector3(1.0, 1.0, 1.0)
        return Material(white, metalness=0.0, roughness=1.0, emission=white * intensity)

class ColorPresets:
    """Base colors of the reference box scene."""

    WHITE = Vector3(1.0, 1.0, 1.0)
    RED = Vector3(1.0, 0.0, 0.0)
    GREEN = Vector3(0.0, 0.1, 0.0)
    BLUE = Vector3(0.0, 0.0, 1.0)
    PINK = Vector3(0.8, 0.2, 0.2)

    @staticmethod
    def matte(color: Vector3) -> Material:
        """Create a fully rough dielectric with the given color."""
        return Material(color, metalness=0.0, roughness=1.0)
