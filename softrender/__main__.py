import argparse
import logging
import sys
from typing import Optional, Sequence

from .colour import WHITE
from .model import Model, ModelError
from .renderer import SHADERS, CameraParameters, LightParameters, Renderer

logger = logging.getLogger("softrender")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = CameraParameters()
    parser = argparse.ArgumentParser(
        prog="softrender",
        description="Render a Wavefront OBJ model to an image.",
    )
    parser.add_argument("model", help="Path to .obj file")
    parser.add_argument("--texture", help="Diffuse texture image")
    parser.add_argument("-o", "--output", default="output.png",
                        help="Output image (default: output.png)")
    parser.add_argument("--depth-output", help="Also write the depth map here")
    parser.add_argument("--width", type=int, default=defaults.width)
    parser.add_argument("--height", type=int, default=defaults.height)
    parser.add_argument("--shader", choices=sorted(SHADERS), default="gouraud")
    parser.add_argument("--wireframe", action="store_true",
                        help="Draw face edges instead of filled faces")
    parser.add_argument("--eye", type=float, nargs=3, default=defaults.eye,
                        metavar=("X", "Y", "Z"))
    parser.add_argument("--centre", type=float, nargs=3, default=defaults.centre,
                        metavar=("X", "Y", "Z"))
    parser.add_argument("--up", type=float, nargs=3, default=defaults.up,
                        metavar=("X", "Y", "Z"))
    parser.add_argument("--light", type=float, nargs=3,
                        default=LightParameters().direction, metavar=("X", "Y", "Z"),
                        help="Direction towards the light")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for progress, -vv for per-face details")

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=[logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)],
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        model = Model.load(args.model, args.texture)
    except ModelError as err:
        logger.error("%s", err)
        return 1

    camera = CameraParameters(
        width=args.width,
        height=args.height,
        eye=tuple(args.eye),
        centre=tuple(args.centre),
        up=tuple(args.up),
    )
    world = Renderer.create_world(camera, LightParameters(direction=tuple(args.light)))
    frame, depth = Renderer.create_buffers(camera.width, camera.height)

    if args.wireframe:
        Renderer.render_wireframe(model, world, frame, colour=WHITE)
    else:
        Renderer.render(model, world, frame, depth, shader=args.shader)

    frame.save(args.output)
    if args.depth_output:
        depth.to_image().save(args.depth_output)
        logger.info("Saved depth map to %s", args.depth_output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
