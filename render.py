import os
import sys
import time
import warnings

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


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from argparse import ArgumentParser

from mandelgray import (
    BACKENDS,
    ConfigurationError,
    RenderParameters,
    render_frame,
    resolve_output_path,
    write_grayscale_image,
)
from mandelgray.renderer import MAX_SAMPLE
from mandelgray.sink import DEFAULT_FILENAME


def select_device():
    """Use the first visible GPU when TensorFlow can claim it, else the CPU."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        # Memory growth must be set before the GPUs are initialized.
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


def build_parser():
    parser = ArgumentParser(description='Render a grayscale image of the Mandelbrot set.')

    parser.add_argument('--center-x', type=float,
                        dest='center_x', help='real coordinate of the center of the view window',
                        metavar='CENTER_X', default=-0.5)

    parser.add_argument('--center-y', type=float,
                        dest='center_y', help='imaginary coordinate of the center of the view window',
                        metavar='CENTER_Y', default=0.0)

    parser.add_argument('--size', type=float,
                        dest='size', help='edge length of the square view window in the complex plane',
                        metavar='SIZE', default=2.0)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='maximum number of iterations before a point counts as inside the set',
                        metavar='MAX_ITERATIONS', default=255)

    parser.add_argument('--pixels-wide', type=int,
                        dest='pixels_wide', help='width and height of the square output image in pixels',
                        metavar='PIXELS_WIDE', default=1024)

    parser.add_argument('--escape-radius', type=float,
                        dest='escape_radius', help='magnitude past which an orbit counts as escaped. Defaults to SIZE.',
                        metavar='ESCAPE_RADIUS', default=None)

    parser.add_argument('--output', type=str,
                        dest='output', help='image file to write, relative to the current directory',
                        metavar='OUTPUT', default=DEFAULT_FILENAME)

    parser.add_argument('--format', type=str,
                        dest='format', help='file format passed to Pillow. Defaults to the extension of OUTPUT.',
                        metavar='FORMAT', default=None)

    parser.add_argument('--backend', choices=BACKENDS, default='tensorflow',
                        help='"tensorflow" evaluates the whole grid at once; "python" walks it pixel by pixel.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    try:
        params = RenderParameters(
            center_x=opt.center_x,
            center_y=opt.center_y,
            size=opt.size,
            max_iterations=opt.max_iterations,
            pixels_wide=opt.pixels_wide,
            escape_radius=opt.escape_radius,
        )
    except ConfigurationError as exc:
        parser.error(str(exc))

    if params.saturates:
        warnings.warn(
            f"--max-iterations {params.max_iterations} exceeds {MAX_SAMPLE}; "
            f"escape counts beyond the 8-bit range are clamped to white.",
            RuntimeWarning,
            stacklevel=2,
        )

    log("TensorFlow version: %s" % tf.__version__)
    device = select_device() if opt.backend == 'tensorflow' else None
    log("Rendering %s" % (params,))

    start = time.perf_counter()
    result = render_frame(params, backend=opt.backend, device=device)
    log("Rendered %dx%d samples in %.3fs" % (params.pixels_wide, params.pixels_wide, time.perf_counter() - start))

    output_path = resolve_output_path(opt.output)
    log("Writing %s" % output_path)
    written = write_grayscale_image(
        result.samples,
        params.pixels_wide,
        params.pixels_wide,
        output_path,
        image_format=opt.format,
    )
    if not written:
        print("Failed to write out file")
        return 1

    print("Success!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
