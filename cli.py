"""Command line front end: render a scene definition, save and/or show it."""
import argparse
import logging
import sys

from ExampleSceneDef import ReferenceSceneExample
from utils import DEFAULT_WIDTH, DEFAULT_HEIGHT

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description='Hard-shadow Blinn-Phong ray tracer')
    parser.add_argument('--width', type=int, default=DEFAULT_WIDTH, help='Image width')
    parser.add_argument('--height', type=int, default=DEFAULT_HEIGHT, help='Image height')
    parser.add_argument('-o', '--output', type=str, default=None,
                        help='Write the image to this file (format from the extension)')
    parser.add_argument('--show', action='store_true', help='Display the image when done')
    parser.add_argument('--view-from-eye', action='store_true',
                        help='Shade with the view direction toward the camera eye instead of the origin')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log per-row progress')
    return parser


def render(scene_def, argv=None):
    """Render scene_def (an ExampleSceneDef) as directed by the command line."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.width <= 0 or args.height <= 0:
        parser.error("resolution must be positive, got {}x{}".format(args.width, args.height))
    if args.output is None and not args.show:
        parser.error("nothing to do: pass --output and/or --show")

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    scene_def.scene.view_from_eye = args.view_from_eye
    logger.info("rendering %d surfaces at %dx%d", len(scene_def.scene.surfs), args.width, args.height)
    im = scene_def.render(output_path=args.output, output_shape=[args.height, args.width])
    if args.output is not None:
        logger.info("wrote %s", args.output)
    if args.show:
        im.show(title='ray')
    return im


def main(argv=None):
    render(ReferenceSceneExample(), argv)
    return 0


if __name__ == '__main__':
    sys.exit(main())
