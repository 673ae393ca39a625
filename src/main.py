# main.py
import argparse
import sys
import numpy as np
from core.vector import Vector3
from camera.camera import Camera
from geometry.world import Scene, SceneObject
from geometry.sphere import Sphere
from geometry.mesh import load_obj, MeshLoadError
from materials.material import Material
from materials.presets import ColorPresets, LightPresets, MetalPresets
from renderer.raytracer import Renderer
from renderer.image_writer import save_image

QUALITY_LEVELS = {
    "preview": {"width": 200, "height": 200, "samples": 16, "depth": 3},
    "default": {"width": 800, "height": 800, "samples": 200, "depth": 3},
    "final": {"width": 1200, "height": 1200, "samples": 1000, "depth": 5},
}

def create_world() -> Scene:
    """
    Closed box built from five giant spheres and an open-ish back wall,
    lit by one bright sphere near the ceiling, with a rough metal sphere
    and a matte sphere on the floor.
    """
    scene = Scene()
    white = ColorPresets.matte(ColorPresets.WHITE)

    scene.add(SceneObject(Sphere(Vector3(1005.0, 2.0, 0.0), 1000.0),
                          ColorPresets.matte(ColorPresets.RED)))
    scene.add(SceneObject(Sphere(Vector3(-1005.0, 2.0, 0.0), 1000.0),
                          ColorPresets.matte(ColorPresets.BLUE)))
    scene.add(SceneObject(Sphere(Vector3(0.0, 4.0, 0.0), 1.5),
                          LightPresets.white_light(10.0)))
    scene.add(SceneObject(Sphere(Vector3(0.0, 1005.0, 0.0), 1000.0), white))
    scene.add(SceneObject(Sphere(Vector3(0.0, -1003.0, 0.0), 1000.0), white))
    scene.add(SceneObject(Sphere(Vector3(0.0, 0.0, 1005.0), 1000.0), white))
    scene.add(SceneObject(Sphere(Vector3(0.0, 0.0, -1006.0), 1000.0),
                          ColorPresets.matte(ColorPresets.GREEN)))
    scene.add(SceneObject(Sphere(Vector3(-2.0, -2.0, 0.0), 1.0),
                          MetalPresets.tinted(ColorPresets.PINK, roughness=0.2)))
    scene.add(SceneObject(Sphere(Vector3(2.0, -2.0, 0.0), 1.0),
                          ColorPresets.matte(ColorPresets.PINK)))
    return scene

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Monte Carlo path tracer")
    parser.add_argument("--quality", choices=sorted(QUALITY_LEVELS), default="default",
                        help="preset for resolution, samples and depth")
    parser.add_argument("--width", type=int, help="image width in pixels")
    parser.add_argument("--height", type=int, help="image height in pixels")
    parser.add_argument("--samples", type=int, help="samples per pixel")
    parser.add_argument("--depth", type=int, help="maximum number of bounces")
    parser.add_argument("--gamma", type=float, default=2.2)
    parser.add_argument("--fov", type=float, default=80.0, help="vertical field of view in degrees")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--mesh", help="OBJ file added to the scene with a matte white material")
    parser.add_argument("--output", "-o", default="image.png")
    parser.add_argument("--preview", action="store_true", help="show the result in a window")
    parser.add_argument("--quiet", action="store_true")
    return parser.parse_args(argv)

class Application:
    def __init__(self, args: argparse.Namespace):
        quality = QUALITY_LEVELS[args.quality]
        self.width = args.width if args.width is not None else quality["width"]
        self.height = args.height if args.height is not None else quality["height"]
        self.samples = args.samples if args.samples is not None else quality["samples"]
        self.depth = args.depth if args.depth is not None else quality["depth"]
        self.output = args.output
        self.preview = args.preview
        self.verbose = not args.quiet

        self.camera = Camera.looking_at(
            Vector3(0.0, 0.0, 5.0),
            Vector3(0.0, 0.0, 0.0),
            Vector3(0.0, 1.0, 0.0),
            args.fov,
            self.width / self.height
        )

        self.world = create_world()
        if args.mesh:
            triangles = load_obj(args.mesh, verbose=self.verbose)
            self.world.add_mesh(triangles, Material(Vector3(0.9, 0.9, 0.9)))

        self.renderer = Renderer(
            self.width,
            self.height,
            samples_per_pixel=self.samples,
            max_depth=self.depth,
            gamma=args.gamma,
            seed=args.seed,
            verbose=self.verbose
        )

    def run(self) -> np.ndarray:
        image = self.renderer.render(self.camera, self.world)
        save_image(self.output, image, self.width, self.height, verbose=self.verbose)
        if self.preview:
            show_preview(image)
        return image

def show_preview(image: np.ndarray) -> None:
    """Display a rendered (height, width, 3) image until the window is closed."""
    import pygame

    height, width = image.shape[:2]
    pygame.init()
    try:
        screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Path Tracer")
        # surfarray is indexed [x, y]
        surface = pygame.surfarray.make_surface(image.swapaxes(0, 1))
        screen.blit(surface, (0, 0))
        pygame.display.flip()

        clock = pygame.time.Clock()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
            clock.tick(30)
    finally:
        pygame.quit()

def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        app = Application(args)
    except (FileNotFoundError, MeshLoadError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    try:
        app.run()
    except OSError as e:
        print(f"Error: could not write {args.output}: {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
