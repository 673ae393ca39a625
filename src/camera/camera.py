# camera/camera.py
import math
import numpy as np
from core.vector import Vector3
from core.ray import Ray
from renderer.jit_kernels import camera_ray_direction

class Camera:
    """
    Pinhole camera. The image plane sits one unit in front of the eye and
    spans tan(fov/2) vertically in each direction.
    """
    def __init__(self, origin: Vector3, forward: Vector3, right: Vector3, up: Vector3,
                 half_width: float, half_height: float):
        self.origin = origin
        self.forward = forward
        self.right = right
        self.up = up
        self.half_width = half_width
        self.half_height = half_height

    @classmethod
    def looking_at(cls, eye: Vector3, target: Vector3, up: Vector3,
                   vertical_fov: float, aspect_ratio: float) -> "Camera":
        """
        Build a camera at eye looking at target.

        vertical_fov is in degrees; aspect_ratio is width / height.
        """
        if not 0.0 < vertical_fov < 180.0:
            raise ValueError(f"Field of view must be in (0, 180) degrees, got {vertical_fov}")
        if aspect_ratio <= 0:
            raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")

        forward = (target - eye).normalize()
        right = forward.cross(up).normalize()
        if right.length() == 0:
            raise ValueError("Up vector must not be parallel to the viewing direction")
        true_up = right.cross(forward)

        half_height = math.tan(math.radians(vertical_fov) / 2.0)
        half_width = aspect_ratio * half_height
        return cls(eye, forward, right, true_up, half_width, half_height)

    def ray_at(self, u: float, v: float) -> Ray:
        """
        Primary ray through image-plane coordinates u, v in [0, 1]:
        u = 0 is the left edge and v = 0 the top edge of the image.
        """
        direction = np.empty(3)
        forward, right, up = self.basis_arrays()
        camera_ray_direction(forward, right, up, self.half_width, self.half_height,
                             u, v, direction)
        return Ray(self.origin, Vector3.from_array(direction))

    def basis_arrays(self):
        """(forward, right, up) as float64 arrays for the render kernel."""
        return self.forward.to_array(), self.right.to_array(), self.up.to_array()
