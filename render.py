import logging
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


from argparse import ArgumentParser

from mandelbrot_tiles import (
    ConfigError,
    FixedSampler,
    RenderConfig,
    RenderEngine,
    UniformSampler,
)
from mandelbrot_tiles import config as defaults
from mandelbrot_tiles.imaging import save_image


def select_device(backend):
    """Pick the TensorFlow device for the tensorflow backend."""

    if backend != "tensorflow":
        return None

    import tensorflow as tf

    if _suppress_messages:
        tf.get_logger().setLevel("ERROR")
    log("TensorFlow version: %s" % tf.__version__)

    gpus = tf.config.list_physical_devices('GPU')
    if gpus:
        try:
            for gpu in gpus:
                tf.config.experimental.set_memory_growth(gpu, True)
            log("GPU found, using %s" % gpus[0].name)
            return '/GPU:0'
        except RuntimeError as e:
            log(e)
            return '/CPU:0'
    log("No GPU found, using CPU")
    return '/CPU:0'


@dataclass
class OutputConfig:
    path: Path
    image_format: str
    raw: bool


def build_parser():
    parser = ArgumentParser(description='Render a supersampled image of the Mandelbrot set.')

    parser.add_argument('--pos-x', type=float,
                        dest='pos_x', help='real coordinate of the left edge of the viewport',
                        metavar='POS_X', default=defaults.DEFAULT_POS_X)

    parser.add_argument('--pos-y', type=float,
                        dest='pos_y', help='imaginary coordinate of the top edge of the viewport',
                        metavar='POS_Y', default=defaults.DEFAULT_POS_Y)

    parser.add_argument('--height', type=float,
                        dest='height', help='height of the viewport in the complex plane; the width follows the image aspect ratio',
                        metavar='HEIGHT', default=defaults.DEFAULT_HEIGHT)

    parser.add_argument('--width', type=int,
                        dest='img_width', help='image width in pixels',
                        metavar='WIDTH', default=defaults.DEFAULT_IMG_WIDTH)

    parser.add_argument('--height-px', type=int,
                        dest='img_height', help='image height in pixels',
                        metavar='HEIGHT_PX', default=defaults.DEFAULT_IMG_HEIGHT)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iter', help='maximum number of iterations before a point counts as inside the set',
                        metavar='MAX_ITERATIONS', default=defaults.DEFAULT_MAX_ITER)

    parser.add_argument('--samples', type=int,
                        dest='samples', help='jittered samples averaged per pixel',
                        metavar='SAMPLES', default=defaults.DEFAULT_SAMPLES)

    parser.add_argument('--blocks', type=int,
                        dest='num_blocks', help='number of tiles; the image is cut into a floor(sqrt(BLOCKS)) square grid',
                        metavar='BLOCKS', default=defaults.DEFAULT_NUM_BLOCKS)

    parser.add_argument('--threads', type=int,
                        dest='num_threads', help='number of worker threads',
                        metavar='THREADS', default=defaults.DEFAULT_NUM_THREADS)

    parser.add_argument('--legacy-tiling', action='store_true',
                        help='Leave the pixels that do not divide evenly into the tile grid unrendered.')

    parser.add_argument('--backend', choices=['python', 'tensorflow'], default='tensorflow',
                        help='"python" evaluates one sample at a time; "tensorflow" evaluates whole tiles at once.')

    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for the jitter generator. Output is only reproducible for a fixed thread count.')

    parser.add_argument('--fixed-jitter', type=float, default=None, metavar='VALUE',
                        help='Use the same jitter VALUE in [0, 1) for every sample; output becomes deterministic.')

    parser.add_argument('--output', dest='output', type=str, default=None,
                        help='Destination file. Defaults to mandelbrot.<format>.')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format. Any extension supported by Pillow, or "raw" for the bare RGBA bytes. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    image_format = (getattr(opt, "format", "png") or "png").lower().lstrip(".")
    if not image_format:
        image_format = "png"
    raw = image_format == "raw"

    output_arg = getattr(opt, "output", None)
    if output_arg:
        output_path = Path(output_arg).expanduser()
        if output_path.exists() and output_path.is_dir():
            parser.error("--output must point to a file, not a directory.")
        expected_suffix = f".{image_format}"
        if output_path.suffix:
            if not raw and output_path.suffix.lower() != expected_suffix.lower():
                parser.error(f"--output extension {output_path.suffix} does not match --format {image_format}.")
        else:
            output_path = output_path.with_suffix(expected_suffix)
    else:
        output_path = Path(f"mandelbrot.{image_format}")

    return OutputConfig(path=output_path.resolve(), image_format=image_format, raw=raw)


def build_config(opt) -> RenderConfig:
    return RenderConfig(
        pos_x=opt.pos_x,
        pos_y=opt.pos_y,
        height=opt.height,
        img_width=opt.img_width,
        img_height=opt.img_height,
        max_iter=opt.max_iter,
        samples=opt.samples,
        num_blocks=opt.num_blocks,
        num_threads=opt.num_threads,
        legacy_tiling=bool(opt.legacy_tiling),
    )


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)
    logging.basicConfig(
        level=logging.INFO if VERBOSE else logging.WARNING,
        format="[%(asctime)s] [%(threadName)s] [%(levelname)-5s] %(message)s",
        datefmt="%H:%M:%S",
    )

    output_config = resolve_output_config(opt, parser)

    if opt.fixed_jitter is not None:
        try:
            sampler = FixedSampler(opt.fixed_jitter)
        except ValueError as exc:
            parser.error(str(exc))
    else:
        sampler = UniformSampler(opt.seed)

    config = build_config(opt)
    engine = RenderEngine(sampler, opt.backend, device=select_device(opt.backend))

    try:
        buffer = engine.render(config)
    except ConfigError as exc:
        parser.error(f"invalid render parameters: {exc}")

    output_config.path.parent.mkdir(parents=True, exist_ok=True)
    if output_config.raw:
        output_config.path.write_bytes(buffer.tobytes())
    else:
        save_image(buffer, output_config.path, output_config.image_format)
    log("Wrote %dx%d image to %s" % (buffer.width, buffer.height, output_config.path))
    return output_config.path


if __name__ == '__main__':
    main()
