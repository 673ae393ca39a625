from geometry.hittable import Hittable, HitRecord
from geometry.sphere import Sphere
from geometry.mesh import Triangle, Vertex, load_obj, MeshLoadError
from geometry.world import Scene, SceneObject, HitResult
