import os
import tempfile
import unittest
import numpy as np
from PIL import Image as PIM
from ray import *
from utils import normalize, vec
from ExampleSceneDef import ReferenceSceneExample
from ImLite import Image
import cli

def assert_direction_matches(v, w):
    np.testing.assert_almost_equal(normalize(v), normalize(w))


def matte(color, ambient=0.1):
    return Material(k_a=ambient * vec(color), k_d=vec(color))


class TestSphereIntersect(unittest.TestCase):

    def confirm_hit(self, sphere, ray):
        # make sure the hit lies on the sphere, then return its distance
        t = sphere.intersect(ray)
        self.assertIsNotNone(t)
        point = ray.at(t)
        self.assertAlmostEqual(np.linalg.norm(point - sphere.center), sphere.radius, places=5)
        np.testing.assert_almost_equal(np.linalg.norm(sphere.normal_at(point)), 1.0)
        return t

    def test_front_hit(self):
        sphere = Sphere(vec([0, 0, -7]), 2.0, None)
        ray = Ray(vec([0, 0, 0]), vec([0, 0, -1]))
        t = self.confirm_hit(sphere, ray)
        self.assertAlmostEqual(t, 5.0)
        np.testing.assert_almost_equal(sphere.normal_at(ray.at(t)), [0, 0, 1])

    def test_off_center_hit(self):
        unit_sphere = Sphere(vec([0, 0, 0]), 1.0, None)
        t = self.confirm_hit(unit_sphere, Ray(vec([1.0, 0.5, 0.0]), vec([-1.0, 0.0, 0.0])))
        self.assertAlmostEqual(t, 1 - np.sin(np.pi/3))

    def test_misses(self):
        sphere = Sphere(vec([0, 0, -7]), 2.0, None)
        # passes above
        self.assertIsNone(sphere.intersect(Ray(vec([0, 5, 0]), vec([0, 0, -1]))))
        # sphere entirely behind the origin
        self.assertIsNone(sphere.intersect(Ray(vec([0, 0, 0]), vec([0, 0, 1]))))

    def test_origin_inside_hits_far_wall(self):
        sphere = Sphere(vec([0, 0, -7]), 2.0, None)
        t = self.confirm_hit(sphere, Ray(vec([0, 0, -7]), vec([0, 0, -1])))
        self.assertAlmostEqual(t, 2.0)
        t = self.confirm_hit(sphere, Ray(vec([0, 0, -6]), vec([0, 0, 1])))
        self.assertAlmostEqual(t, 1.0)

    def test_origin_on_surface_uses_far_root(self):
        sphere = Sphere(vec([0, 0, -7]), 2.0, None)
        # near root is exactly 0, so the far root is taken
        t = self.confirm_hit(sphere, Ray(vec([0, 0, -5]), vec([0, 0, -1])))
        self.assertAlmostEqual(t, 4.0)
        # leaving the sphere: far root is 0 as well, no hit
        self.assertIsNone(sphere.intersect(Ray(vec([0, 0, -5]), vec([0, 0, 1]))))

    def test_normal(self):
        sphere = Sphere(vec([1, 2, 3]), 3.0, None)
        np.testing.assert_almost_equal(sphere.normal_at(vec([1, 2, 0])), [0, 0, -1])
        np.testing.assert_almost_equal(sphere.normal_at(vec([4, 2, 3])), [1, 0, 0])


class TestPlaneIntersect(unittest.TestCase):

    def test_hit_from_above(self):
        plane = Plane(-2.0, None)
        self.assertAlmostEqual(plane.intersect(Ray(vec([0, 5, 0]), vec([0, -1, 0]))), 7.0)

    def test_parallel_ray_misses(self):
        plane = Plane(-2.0, None)
        self.assertIsNone(plane.intersect(Ray(vec([0, 5, 0]), vec([1, 0, 0]))))
        self.assertIsNone(plane.intersect(Ray(vec([0, 5, 0]), normalize(np.array([1, 1e-8, 0])))))

    def test_plane_behind_ray_misses(self):
        plane = Plane(-2.0, None)
        self.assertIsNone(plane.intersect(Ray(vec([0, 5, 0]), vec([0, 1, 0]))))

    def test_hit_from_below_and_normal(self):
        plane = Plane(3.0, None)
        self.assertAlmostEqual(plane.intersect(Ray(vec([0, 0, 0]), normalize(np.array([0, 1, 1])))),
                               3.0 * np.sqrt(2))
        np.testing.assert_equal(plane.normal_at(vec([7, 3, -2])), [0, 1, 0])


class TestCamera(unittest.TestCase):

    def test_center_ray(self):
        cam = Camera()
        ray = cam.generate_ray(1, 1, RenderConfig(3, 3))
        np.testing.assert_almost_equal(ray.origin, vec([0, 0, 0]))
        np.testing.assert_almost_equal(ray.direction, vec([0, 0, -1]))

    def test_corner_rays(self):
        cam = Camera()
        config = RenderConfig(2, 2)
        # row 0 is the bottom of the view plane
        assert_direction_matches(cam.generate_ray(0, 0, config).direction, vec([-0.05, -0.05, -0.1]))
        assert_direction_matches(cam.generate_ray(1, 0, config).direction, vec([0.05, -0.05, -0.1]))
        assert_direction_matches(cam.generate_ray(0, 1, config).direction, vec([-0.05, 0.05, -0.1]))

    def test_directions_are_unit_length(self):
        cam = Camera(eye=vec([1, 2, 3]), u=vec([2, 0, 0]), v=vec([0, 2, 0]), w=vec([0, 0, 2]))
        config = RenderConfig(16, 9)
        for j in range(config.height):
            for i in range(config.width):
                ray = cam.generate_ray(i, j, config)
                self.assertAlmostEqual(np.linalg.norm(ray.direction), 1.0, places=12)
                np.testing.assert_almost_equal(ray.origin, [1, 2, 3])

    def test_resolution_read_on_every_call(self):
        cam = Camera()
        small = RenderConfig(256, 256)
        large = small.resized(512, 512)
        for i, j in [(0, 0), (17, 200), (255, 255)]:
            np.testing.assert_almost_equal(
                cam.generate_ray(i, j, small).direction,
                cam.generate_ray(2 * i + 0.5, 2 * j + 0.5, large).direction)
        self.assertFalse(np.allclose(cam.generate_ray(0, 0, small).direction,
                                     cam.generate_ray(0, 0, large).direction))

    def test_rays_are_read_only(self):
        ray = Camera().generate_ray(0, 0, RenderConfig(4, 4))
        with self.assertRaises(ValueError):
            ray.direction[0] = 1.0


class TestRenderConfig(unittest.TestCase):

    def test_shape(self):
        self.assertEqual(RenderConfig(4, 3).shape, (3, 4, 3))
        self.assertEqual(RenderConfig().shape, (512, 512, 3))

    def test_non_positive_size(self):
        with self.assertRaises(ValueError):
            RenderConfig(0, 10)
        with self.assertRaises(ValueError):
            RenderConfig(10, 10).resized(10, -1)


class TestSceneIntersect(unittest.TestCase):

    def test_nearest_surface_wins(self):
        far = Sphere(vec([0, 0, -10]), 1.0, matte([1, 0, 0]))
        near = Sphere(vec([0, 0, -5]), 1.0, matte([0, 1, 0]))
        scene = Scene([far, near], Camera(), PointLight(vec([0, 5, 0])))
        hit = scene.intersect(Ray(vec([0, 0, 0]), vec([0, 0, -1])))
        self.assertAlmostEqual(hit.t, 4.0)
        self.assertEqual(hit.index, 1)
        self.assertIs(hit.material, near.material)
        np.testing.assert_almost_equal(hit.point, [0, 0, -4])
        np.testing.assert_almost_equal(hit.normal, [0, 0, 1])

    def test_tie_goes_to_earlier_surface(self):
        first = Sphere(vec([0, 0, -5]), 1.0, matte([1, 0, 0]))
        second = Sphere(vec([0, 0, -5]), 1.0, matte([0, 0, 1]))
        ray = Ray(vec([0, 0, 0]), vec([0, 0, -1]))
        scene = Scene([first, second], Camera(), PointLight(vec([0, 5, 0])))
        self.assertEqual(scene.intersect(ray).index, 0)
        self.assertIs(scene.intersect(ray).material, first.material)
        scene = Scene([second, first], Camera(), PointLight(vec([0, 5, 0])))
        self.assertIs(scene.intersect(ray).material, second.material)

    def test_miss_is_background(self):
        scene = Scene([Sphere(vec([0, 0, -5]), 1.0, matte([1, 0, 0]))], Camera(), PointLight(vec([0, 5, 0])))
        ray = Ray(vec([0, 0, 0]), vec([0, 0, 1]))
        self.assertEqual(scene.intersect(ray).t, np.inf)
        np.testing.assert_equal(scene.trace(ray), [0, 0, 0])

    def test_add_surface_returns_index(self):
        scene = Scene([], Camera(), PointLight(vec([0, 5, 0])))
        self.assertEqual(scene.add_surface(Plane(-1, matte([1, 1, 1]))), 0)
        self.assertEqual(scene.add_surface(Sphere(vec([0, 0, -3]), 1.0, matte([1, 1, 1]))), 1)
        self.assertEqual(scene.intersect(Ray(vec([0, 0, 0]), vec([0, 0, -1]))).index, 1)

    def test_ray_start_filters_near_hits(self):
        scene = Scene([Sphere(vec([0, 0, -5]), 1.0, None)], Camera(), PointLight(vec([0, 5, 0])))
        self.assertTrue(scene.is_occluded(Ray(vec([0, 0, 0]), vec([0, 0, -1]), start=3.9)))
        self.assertFalse(scene.is_occluded(Ray(vec([0, 0, 0]), vec([0, 0, -1]), start=4.1)))


class TestShading(unittest.TestCase):

    def setUp(self):
        self.material = Material(k_a=vec([0.1, 0.1, 0.1]), k_d=vec([0.5, 0.25, 0.125]))
        self.point = np.array([0.0, -2.0, -5.0])
        self.normal = np.array([0.0, 1.0, 0.0])
        self.ground = Plane(-2.0, self.material)
        self.light = PointLight(vec([0, 8, -5]))

    def test_unblocked_point_gets_diffuse(self):
        scene = Scene([self.ground], Camera(), self.light)
        np.testing.assert_allclose(scene.shade(self.point, self.normal, self.material),
                                   [0.6, 0.35, 0.225], rtol=1e-6)

    def test_blocked_point_gets_ambient_only(self):
        blocker = Sphere(vec([0, 3, -5]), 1.0, matte([1, 1, 1]))
        scene = Scene([self.ground, blocker], Camera(), self.light)
        np.testing.assert_allclose(scene.shade(self.point, self.normal, self.material),
                                   [0.1, 0.1, 0.1], rtol=1e-6)

    def test_grazing_light_gives_no_diffuse(self):
        scene = Scene([], Camera(), PointLight(vec([10, -2, -5])))
        np.testing.assert_allclose(scene.shade(self.point, self.normal, self.material),
                                   [0.1, 0.1, 0.1], rtol=1e-6, atol=1e-7)

    def test_specular_uses_half_vector(self):
        shiny = Material(k_a=vec([0, 0, 0]), k_d=vec([0, 0, 0]), k_s=vec([1, 1, 1]), p=8)
        scene = Scene([], Camera(), self.light)
        halfway = normalize(np.array([0, 1, 0]) + normalize(-self.point))
        expected = np.dot(self.normal, halfway) ** 8
        np.testing.assert_allclose(scene.shade(self.point, self.normal, shiny), [expected] * 3, rtol=1e-6)

    def test_scalar_specular_coefficient(self):
        shiny = Material(k_a=vec([0, 0, 0]), k_d=vec([0, 0, 0]), k_s=0.5, p=1)
        self.assertEqual(shiny.k_s.shape, (3,))
        color = Scene([], Camera(), self.light).shade(self.point, self.normal, shiny)
        self.assertTrue(np.all(color > 0))

    def test_no_clamping(self):
        hot = Material(k_a=vec([0.5, 0.5, 0.5]), k_d=vec([2, 2, 2]))
        color = Scene([], Camera(), self.light).shade(self.point, self.normal, hot)
        np.testing.assert_allclose(color, [2.5, 2.5, 2.5], rtol=1e-6)


class TestViewDirection(unittest.TestCase):

    def shade(self, eye, view_from_eye):
        shiny = Material(k_a=vec([0, 0, 0]), k_d=vec([0, 0, 0]), k_s=vec([1, 1, 1]), p=1)
        scene = Scene([], Camera(eye=eye), PointLight(vec([-4, 4, -3])), view_from_eye=view_from_eye)
        return scene.shade(np.array([0.0, 0.0, -5.0]), np.array([0.0, 0.0, 1.0]), shiny)

    def test_variants_agree_with_eye_at_origin(self):
        np.testing.assert_allclose(self.shade(vec([0, 0, 0]), False), self.shade(vec([0, 0, 0]), True))

    def test_relocated_eye(self):
        origin_view = self.shade(vec([10, 0, 0]), False)
        eye_view = self.shade(vec([10, 0, 0]), True)
        # the default ignores where the camera is
        np.testing.assert_allclose(origin_view, self.shade(vec([0, 0, 0]), False))
        self.assertFalse(np.allclose(origin_view, eye_view))


class TestGamma(unittest.TestCase):

    def test_half(self):
        self.assertAlmostEqual(float(gamma_correct(0.5)), 0.7297, places=4)

    def test_per_channel_without_clamping(self):
        np.testing.assert_allclose(gamma_correct(np.array([0.0, 1.0, 2.0])),
                                   [0.0, 1.0, 2.0 ** (1 / 2.2)])


class TestRender(unittest.TestCase):

    def setUp(self):
        self.example = ReferenceSceneExample()
        self.scene = self.example.scene

    def test_pixel_order(self):
        config = RenderConfig(8, 6)
        img = render_image(self.scene, config)
        self.assertEqual(img.shape, (6, 8, 3))
        for i, j in [(0, 0), (7, 0), (0, 5), (3, 4)]:
            ray = self.scene.camera.generate_ray(i, j, config)
            np.testing.assert_allclose(img[j, i], gamma_correct(self.scene.trace(ray)), rtol=1e-6)
        # flat row-major sequence
        self.assertEqual(img.reshape(-1, 3).shape, (48, 3))
        np.testing.assert_equal(img.reshape(-1, 3)[8 * 4 + 3], img[4, 3])

    def test_deterministic(self):
        config = RenderConfig(24, 24)
        np.testing.assert_array_equal(render_image(self.scene, config), render_image(self.scene, config))

    def test_deterministic_full_width_row(self):
        # the middle row of a 512x512 render, traced twice
        config = RenderConfig(512, 512)
        cam = self.scene.camera
        def row():
            return np.array([gamma_correct(self.scene.trace(cam.generate_ray(i, 256, config)))
                             for i in range(config.width)])
        first = row()
        np.testing.assert_array_equal(first, row())
        self.assertTrue(np.all(np.isfinite(first)))
        self.assertGreater(first[256, 1], first[256, 0])

    def test_caller_buffer(self):
        config = RenderConfig(5, 4)
        out = np.full(config.shape, -1.0, np.float32)
        self.assertIs(render_image(self.scene, config, out=out), out)
        self.assertTrue(np.all(out >= 0))
        with self.assertRaises(ValueError):
            render_image(self.scene, config, out=np.zeros((5, 4, 3), np.float32))

    def test_center_pixel_hits_lit_green_sphere(self):
        config = RenderConfig(512, 512)
        ray = self.scene.camera.generate_ray(256, 256, config)
        hit = self.scene.intersect(ray)
        self.assertEqual(hit.index, 2)
        self.assertAlmostEqual(hit.t, 5.0, places=3)
        shadow_ray = Ray(hit.point + 1e-3 * hit.normal, normalize(self.scene.light.position - hit.point), start=1e-3)
        self.assertFalse(self.scene.is_occluded(shadow_ray))
        color = self.scene.trace(ray)
        green = self.scene.surfs[2].material
        self.assertGreater(color[1], green.k_a[1] + 0.1)
        self.assertGreater(color[1], color[0])
        self.assertGreater(color[1], color[2])

    def test_red_sphere_shadow_on_ground(self):
        ground = self.scene.surfs[0]
        # on the line from the light through the red sphere's center
        color = self.scene.shade(np.array([-4.0, -2.0, -9.0]), ground.normal_at(None), ground.material)
        np.testing.assert_allclose(color, ground.material.k_a, rtol=1e-6)
        color = self.scene.shade(np.array([-4.0, -2.0, -4.0]), ground.normal_at(None), ground.material)
        self.assertTrue(np.all(color > ground.material.k_a))

    def test_resize_keeps_colors_of_matching_directions(self):
        small = RenderConfig(16, 16)
        large = small.resized(32, 32)
        img = render_image(self.scene, small)
        cam = self.scene.camera
        for i, j in [(0, 0), (8, 8), (3, 12), (15, 15)]:
            color = gamma_correct(self.scene.trace(cam.generate_ray(2 * i + 0.5, 2 * j + 0.5, large)))
            np.testing.assert_allclose(img[j, i], color, rtol=1e-5)


class TestPresentation(unittest.TestCase):

    def test_image_is_flipped_to_top_down(self):
        buffer = render_image(ReferenceSceneExample().scene, RenderConfig(6, 4))
        im = ReferenceSceneExample().render(output_shape=[4, 6])
        np.testing.assert_array_equal(im.pixels[0], buffer[-1])
        np.testing.assert_array_equal(im.pixels[-1], buffer[0])
        self.assertEqual(im.ipixels.dtype, np.uint8)
        self.assertEqual((im.width, im.height), (6, 4))

    def test_ipixels_clip_out_of_range_values(self):
        im = Image(pixels=np.array([[[2.0, -1.0, 0.5]]]))
        np.testing.assert_array_equal(im.ipixels, [[[255, 0, 128]]])

    def test_write_to_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'ref.png')
            ReferenceSceneExample().render(output_path=path, output_shape=[3, 5])
            with PIM.open(path) as saved:
                self.assertEqual(saved.size, (5, 3))

    def test_cli_writes_png(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'cli.png')
            cli.main(['--width', '4', '--height', '3', '-o', path])
            with PIM.open(path) as saved:
                self.assertEqual(saved.size, (4, 3))

    def test_cli_needs_an_output(self):
        with self.assertRaises(SystemExit):
            cli.main(['--width', '4', '--height', '3'])
        with self.assertRaises(SystemExit):
            cli.main(['--width', '0', '-o', 'unused.png'])



if __name__ == '__main__':
    unittest.main()
