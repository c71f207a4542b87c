import os
import sys
import warnings
from dataclasses import dataclass
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import logging

import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")

from argparse import ArgumentParser

from matplotlib import colormaps

from ifs import (
    IFSError,
    InvalidFrameCount,
    InvalidWorkerCount,
    Window,
    render_julia_animation,
    render_julia_single,
    render_newton,
)
from ifs.encoding import encode_gif, encode_png, write_frames
from ifs.paths import PARAMETER_PATHS
from ifs.pipeline import ON_ERROR_CHOICES
from ifs.server import make_server


def select_device():
    """Use the first GPU when TensorFlow sees one, otherwise the CPU."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


@dataclass
class OutputConfig:
    output: Path
    image_format: str
    frame_dir: Path | None


def _window_options(parser: ArgumentParser) -> None:
    parser.add_argument('--x-res', type=int,
                        dest='x_res', help='resolution of samples along the x-axis',
                        metavar='X_RES', default=1024)

    parser.add_argument('--y-res', type=int,
                        dest='y_res', help='resolution of samples along the y-axis',
                        metavar='Y_RES', default=1024)

    parser.add_argument('--x-center', type=float,
                        dest='x_center', help='x coordinate in the complex plane at the center of the window',
                        metavar='X_CENTER', default=0.0)

    parser.add_argument('--x-width', type=float,
                        dest='x_width', help='width of the sample window in the complex plane',
                        metavar='X_WIDTH', default=4.0)

    parser.add_argument('--y-center', type=float,
                        dest='y_center', help='y coordinate in the complex plane at the center of the window',
                        metavar='Y_CENTER', default=0.0)

    parser.add_argument('--y-width', type=float,
                        dest='y_width', help='height of the sample window in the complex plane',
                        metavar='Y_WIDTH', default=4.0)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')


def _julia_options(parser: ArgumentParser) -> None:
    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='maximum number of times to iterate z -> z^2 + c',
                        metavar='MAX_ITERATIONS', default=400)

    parser.add_argument('--bailout', type=float,
                        dest='bailout', help='modulus beyond which a point counts as escaped',
                        metavar='BAILOUT', default=10.0)

    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='matplotlib colormap for escape counts (default: green/blue ramp)',
                        metavar='COLORMAP', default=None)


def _output_options(parser: ArgumentParser, default_output: str) -> None:
    parser.add_argument('--output', dest='output', type=str, default=default_output,
                        help='Destination file (default: %(default)s).')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for still images. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')


def build_parser():
    parser = ArgumentParser(description='Render Newton and Julia iterated function systems.')
    commands = parser.add_subparsers(dest='command', required=True)

    newton = commands.add_parser('newton', help="basins of Newton's method for z^4 - 1")
    _window_options(newton)
    _output_options(newton, 'newton.png')

    single = commands.add_parser('julia-single', help='a single Julia set for c = re + im*i')
    _window_options(single)
    _julia_options(single)
    _output_options(single, 'julia.png')
    single.add_argument('--re', type=float, default=-1.25, help='real part of c')
    single.add_argument('--im', type=float, default=0.0, help='imaginary part of c')

    julia = commands.add_parser('julia', help='animated GIF of Julia sets along a parameter path')
    _window_options(julia)
    _julia_options(julia)
    _output_options(julia, 'julia.gif')
    julia.add_argument('--frames', type=int, dest='frames', metavar='FRAMES', default=64,
                       help='number of frames to generate')
    julia.add_argument('--workers', type=int, dest='workers', metavar='WORKERS', default=4,
                       help='number of frames rendered concurrently')
    julia.add_argument('--path', dest='path', choices=sorted(PARAMETER_PATHS), default='Angor',
                       help='parameter path followed by c across the animation')
    julia.add_argument('--frame-dir', dest='frame_dir', type=str,
                       help='Also store every frame as a numbered image in this directory.')
    julia.add_argument('--on-error', dest='on_error', choices=ON_ERROR_CHOICES, default='raise',
                       help='abort on a failed frame, or replace it with a black frame')
    julia.add_argument('--timeout', type=float, default=None,
                       help='give up when the animation takes longer than this many seconds')

    serve = commands.add_parser('serve', help='serve /newton, /juliaSingle and /julia over HTTP')
    _window_options(serve)
    serve.add_argument('--host', default='localhost')
    serve.add_argument('--port', type=int, default=8000)

    return parser


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    image_format = (getattr(opt, "format", "png") or "png").lower().lstrip(".")
    output_path = Path(opt.output).expanduser()

    if opt.command == 'julia':
        if output_path.suffix:
            if output_path.suffix.lower() != ".gif":
                parser.error("GIF outputs must end with .gif.")
        else:
            output_path = output_path.with_suffix(".gif")
    else:
        expected_suffix = f".{image_format}"
        if output_path.suffix:
            if output_path.suffix.lower() != expected_suffix.lower():
                parser.error(f"--output extension {output_path.suffix} does not match --format {image_format}.")
        else:
            output_path = output_path.with_suffix(expected_suffix)

    if output_path.exists() and output_path.is_dir():
        parser.error("--output must point to a file, not a directory.")

    frame_dir = getattr(opt, "frame_dir", None)
    return OutputConfig(
        output=output_path.resolve(),
        image_format=image_format,
        frame_dir=Path(frame_dir).expanduser().resolve() if frame_dir else None,
    )


def window_from_options(opt) -> Window:
    return Window(
        x_res=opt.x_res,
        y_res=opt.y_res,
        x_center=opt.x_center,
        y_center=opt.y_center,
        x_width=opt.x_width,
        y_width=opt.y_width,
    )


def _print_progress(done, total):
    print("frame {0} out of {1}".format(done, total), end='\r')


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)
    logging.basicConfig(
        level=logging.DEBUG if VERBOSE else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    log("TensorFlow version: %s" % tf.__version__)

    if opt.x_res < 1 or opt.y_res < 1:
        parser.error("--x-res and --y-res must be positive.")
    if getattr(opt, "colormap", None) is not None and opt.colormap not in colormaps:
        parser.error(f"Unknown colormap '{opt.colormap}'.")

    window = window_from_options(opt)
    device = select_device()

    if opt.command == 'serve':
        server = make_server(opt.host, opt.port, window=window, device=device)
        print("Serving on http://{0}:{1}".format(opt.host, opt.port))
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
        finally:
            server.server_close()
        return

    output_config = resolve_output_config(opt, parser)

    try:
        if opt.command == 'newton':
            encode_png(render_newton(window, device=device), output_config.output, output_config.image_format)
        elif opt.command == 'julia-single':
            raster = render_julia_single(
                complex(opt.re, opt.im),
                window,
                max_iterations=opt.max_iterations,
                bailout=opt.bailout,
                colormap=opt.colormap,
                device=device,
            )
            encode_png(raster, output_config.output, output_config.image_format)
        else:
            sequence = render_julia_animation(
                opt.frames,
                opt.workers,
                opt.path,
                window,
                max_iterations=opt.max_iterations,
                bailout=opt.bailout,
                colormap=opt.colormap,
                device=device,
                on_error=opt.on_error,
                timeout=opt.timeout,
                progress=_print_progress,
            )
            print()
            encode_gif(sequence, output_config.output)
            if output_config.frame_dir is not None:
                write_frames(sequence, output_config.frame_dir, image_format=output_config.image_format)
    except (InvalidFrameCount, InvalidWorkerCount) as exc:
        parser.error(str(exc))
    except IFSError as exc:
        print("error: {0}".format(exc), file=sys.stderr)
        sys.exit(1)

    log("Wrote %s" % output_config.output)


if __name__ == '__main__':
    main()
