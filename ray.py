import logging
import time

import numpy as np
from materials import Material
from geometry import Plane, Sphere, no_hit, Hit
from utils import *

"""
Core implementation of the ray tracer: camera rays, closest-hit search,
Blinn-Phong shading with hard shadows, and the render loop.
"""

logger = logging.getLogger(__name__)


class Ray:

    def __init__(self, origin, direction, start=0.):
        """Create a ray with the given origin and direction.

        Parameters:
          origin : (3,) -- the start point of the ray, a 3D point
          direction : (3,) -- the direction of the ray, a 3D unit vector
          start : float -- hits at or before this t are ignored
        """
        # Double precision for the intersection math; read-only so rays
        # behave as values.
        self.origin = np.array(origin, np.float64)
        self.direction = np.array(direction, np.float64)
        self.origin.setflags(write=False)
        self.direction.setflags(write=False)
        self.start = start

    def at(self, t):
        """The point at distance t along the ray."""
        return self.origin + t * self.direction


class RenderConfig:

    def __init__(self, width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT):
        """Target resolution of a render.

        Passed to every ray generation call, so changing resolution between
        renders only needs a new config.
        """
        if width <= 0 or height <= 0:
            raise ValueError("resolution must be positive, got {}x{}".format(width, height))
        self.width = int(width)
        self.height = int(height)

    @property
    def shape(self):
        return (self.height, self.width, 3)

    def resized(self, width, height):
        return RenderConfig(width, height)

    def __repr__(self):
        return "RenderConfig(width={}, height={})".format(self.width, self.height)


class Camera:

    def __init__(self, eye=vec([0,0,0]), u=vec([1,0,0]), v=vec([0,1,0]), w=vec([0,0,1]),
                 l=-0.1, r=0.1, b=-0.1, t=0.1, d=0.1):
        """Create a pinhole camera.

        Parameters:
          eye : (3,) -- the camera position
          u, v, w : (3,) -- orthonormal basis; the camera looks along -w
          l, r, b, t : float -- view-plane rectangle (left, right, bottom, top)
          d : float -- distance from the eye to the view plane
        """
        self.eye = np.array(eye, np.float64)
        self.u = np.array(u, np.float64)
        self.v = np.array(v, np.float64)
        self.w = np.array(w, np.float64)
        self.l = l
        self.r = r
        self.b = b
        self.t = t
        self.d = d

    def generate_ray(self, ix, iy, config):
        """Compute the primary ray through pixel (ix, iy).

        Pixel coordinates may be fractional; the ray passes through the
        center of the pixel cell starting at (ix, iy). Row 0 is the bottom
        of the view plane.
        """
        ndc_x = (ix + 0.5) / config.width
        ndc_y = (iy + 0.5) / config.height
        screen_x = self.l + (self.r - self.l) * ndc_x
        screen_y = self.b + (self.t - self.b) * ndc_y

        direction = -self.d * self.w + screen_x * self.u + screen_y * self.v

        return Ray(self.eye, normalize(direction))


class PointLight:
    def __init__(self, position):
        """Create a point light at given position"""
        self.position = np.array(position, np.float64)

    def illuminate(self, point, normal, material, scene, view_origin):
        """Compute the diffuse and specular shading at a surface point due to this light.

        Returns zero when the light is blocked.
        """
        light_vec = normalize(self.position - point)

        shadow_ray = Ray(
            origin=point + SHADOW_BIAS * normal,
            direction=light_vec,
            start=SHADOW_BIAS,
        )
        if scene.is_occluded(shadow_ray):
            return np.zeros(3)

        view_vec = normalize(view_origin - point)
        halfway_vec = normalize(light_vec + view_vec)

        diffuse = material.k_d * max(0.0, np.dot(normal, light_vec))
        specular = material.k_s * (max(0.0, np.dot(normal, halfway_vec)) ** material.p)

        return diffuse + specular


class Scene:

    def __init__(self, surfs, camera, light, bg_color=vec([0,0,0]), view_from_eye=False):
        """Create a scene containing the given objects.

        Parameters:
          surfs : list -- surfaces; earlier ones win ties in the closest-hit search
          camera : Camera -- the viewing camera
          light : PointLight -- the only light
          bg_color : (3,) -- color of rays that hit nothing
          view_from_eye : bool -- shade with the view direction toward
            camera.eye instead of toward the world origin
        """
        self.surfs = list(surfs)
        self.camera = camera
        self.light = light
        self.bg_color = bg_color
        self.view_from_eye = view_from_eye

    def add_surface(self, surf):
        """Append a surface and return its index."""
        self.surfs.append(surf)
        return len(self.surfs) - 1

    @property
    def view_origin(self):
        if self.view_from_eye:
            return self.camera.eye
        return np.zeros(3)

    def intersect(self, ray):
        """Computes the first (smallest t) intersection between a ray and the scene.
        """
        closest_t = np.inf
        closest = None
        for i, surf in enumerate(self.surfs):
            t = surf.intersect(ray)
            if t is not None and t > ray.start and t < closest_t:
                closest_t = t
                closest = i
        if closest is None:
            return no_hit

        surf = self.surfs[closest]
        point = ray.at(closest_t)
        return Hit(closest_t, point, surf.normal_at(point), surf.material, closest)

    def is_occluded(self, ray):
        """Return True if any surface blocks the ray (fast boolean)."""
        for surf in self.surfs:
            t = surf.intersect(ray)
            if t is not None and t > ray.start:
                return True
        return False

    def shade(self, point, normal, material):
        """Blinn-Phong color at a surface point: ambient, plus diffuse and
        specular when the light is visible. Not clamped."""
        direct = self.light.illuminate(point, normal, material, self, self.view_origin)
        return material.k_a + direct

    def trace(self, ray):
        hit = self.intersect(ray)
        if hit.t == np.inf:
            return self.bg_color
        return self.shade(hit.point, hit.normal, hit.material)


def render_image(scene, config, out=None):
    """
    Render a ray traced image.

    Returns an array of shape (height, width, 3) of gamma-corrected colors.
    Row 0 is the bottom scanline; out.reshape(-1, 3) is the row-major pixel
    sequence. If out is given it is filled in place.
    """
    if out is None:
        out = np.zeros(config.shape, np.float32)
    elif out.shape != config.shape:
        raise ValueError("output buffer has shape {}, expected {}".format(out.shape, config.shape))

    start = time.perf_counter()
    camera = scene.camera
    for j in range(config.height):
        logger.debug("rendering row %d/%d", j + 1, config.height)
        for i in range(config.width):
            ray = camera.generate_ray(i, j, config)
            out[j, i] = gamma_correct(scene.trace(ray))

    logger.info("rendered %dx%d image with %d surfaces in %.2fs",
                config.width, config.height, len(scene.surfs), time.perf_counter() - start)
    return out
