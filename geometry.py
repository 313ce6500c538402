import numpy as np
from utils import vec, normalize, PLANE_EPSILON

class Hit:
    def __init__(self, t, point=None, normal=None, material=None, index=None):
        """Create a Hit with the given data.

        Parameters:
          t : float -- the t value of the intersection along the ray
          point : (3,) -- the 3D point where the intersection happens
          normal : (3,) -- the 3D outward-facing unit normal to the surface at the hit point
          material : (Material) -- the material of the surface
          index : int -- position of the hit surface in the scene's surface list
        """
        self.t = t
        self.point = point
        self.normal = normal
        self.material = material
        self.index = index

# Value to represent absence of an intersection
no_hit = Hit(np.inf)


class Plane:

    def __init__(self, y, material):
        """Create an infinite horizontal plane at height y, facing up.

        Parameters:
          y : float -- the height of the plane
          material : Material -- the material of the surface
        """
        self.y = float(y)
        self.material = material

    def intersect(self, ray):
        """Distance along the ray to the plane, or None when it misses.

        Rays (nearly) parallel to the plane never hit it.
        """
        if abs(ray.direction[1]) < PLANE_EPSILON:
            return None
        t = (self.y - ray.origin[1]) / ray.direction[1]
        if t > 0:
            return float(t)
        return None

    def normal_at(self, point):
        return vec([0, 1, 0])


class Sphere:

    def __init__(self, center, radius, material):
        """Create a sphere with the given center and radius.

        Parameters:
          center : (3,) -- a 3D point specifying the sphere's center
          radius : float -- a Python float specifying the sphere's radius
          material : Material -- the material of the surface
        """
        self.center = center
        self.radius = radius
        self.material = material

    def intersect(self, ray):
        """Computes the first (smallest positive t) intersection between a ray and this sphere.

        The near root is preferred; when it is not in front of the origin the
        far root is used instead, so a ray starting inside the sphere hits the
        far wall.

        Parameters:
          ray : Ray -- the ray to intersect with the sphere
        Return:
          float or None -- distance along the ray
        """
        sphere_vec = ray.origin - self.center
        a = np.dot(ray.direction, ray.direction)
        b = 2 * np.dot(ray.direction, sphere_vec)
        c = np.dot(sphere_vec, sphere_vec) - self.radius * self.radius
        discriminant = b * b - 4 * a * c
        if discriminant < 0:
            return None
        disc_sqrt = np.sqrt(discriminant)
        t = (-b - disc_sqrt) / (2 * a)
        if t <= 0:
            t = (-b + disc_sqrt) / (2 * a)
        if t > 0:
            return float(t)
        return None

    def normal_at(self, point):
        return normalize(point - self.center)
