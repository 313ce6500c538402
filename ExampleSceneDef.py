import ray
from ImLite import Image
from utils import *

class ExampleSceneDef(object):
    def __init__(self, scene):
        self.scene = scene;

    @property
    def camera(self):
        return self.scene.camera;

    def render(self, output_path=None, output_shape=None, out=None):
        """Render the scene to an Image, also writing it to output_path if given.

        output_shape is [height, width], defaulting to 512x512.
        """
        if(output_shape is None):
            output_shape = [DEFAULT_HEIGHT, DEFAULT_WIDTH];
        config = ray.RenderConfig(width=output_shape[1], height=output_shape[0]);
        pix = ray.render_image(self.scene, config, out=out);
        im = Image.FromRenderBuffer(pix);
        if(output_path is not None):
            im.writeToFile(output_path);
        return im;


def ReferenceSceneExample(view_from_eye=False):
    """Gray ground plane, red, green and blue spheres, one point light."""
    gray = ray.Material(k_a=vec([0.2, 0.2, 0.2]), k_d=vec([1.0, 1.0, 1.0]), k_s=vec([0, 0, 0]), p=0)
    red = ray.Material(k_a=vec([0.2, 0.0, 0.0]), k_d=vec([1.0, 0.0, 0.0]), k_s=vec([0, 0, 0]), p=0)
    green = ray.Material(k_a=vec([0.0, 0.2, 0.0]), k_d=vec([0.0, 0.5, 0.0]), k_s=vec([0.5, 0.5, 0.5]), p=32)
    blue = ray.Material(k_a=vec([0.0, 0.0, 0.2]), k_d=vec([0.0, 0.0, 1.0]), k_s=vec([0, 0, 0]), p=0)

    camera = ray.Camera(vec([0, 0, 0]), vec([1, 0, 0]), vec([0, 1, 0]), vec([0, 0, 1]),
                        l=-0.1, r=0.1, b=-0.1, t=0.1, d=0.1)

    scene = ray.Scene([
        ray.Plane(-2.0, gray),
        ray.Sphere(vec([-4, 0, -7]), 1.0, red),
        ray.Sphere(vec([0, 0, -7]), 2.0, green),
        ray.Sphere(vec([4, 0, -7]), 1.0, blue),
    ], camera, ray.PointLight(vec([-4.0, 4.0, -3.0])), view_from_eye=view_from_eye)

    return ExampleSceneDef(scene=scene);
