"""
Command-line interface for ridge-saw.

Generate ridge data for self-avoiding walk analysis, either from an
image file or from repeatedly generated noise images.
"""

import argparse
import logging
import sys
from typing import Optional

from ridge_saw.config import LoopPolicy, RidgeSawConfig
from ridge_saw.constants import (
    DEFAULT_SCALE,
    DEFAULT_SIZE,
    EXIT_OK,
    RIDGETOOL_DEFAULT,
    RIDGETOOL_ENV,
)
from ridge_saw.errors import ExtractorError, RidgeSawError, UsageError
from ridge_saw.pipeline import run
from ridge_saw.surface import Distribution

logger = logging.getLogger("ridge_saw")

EPILOG = f"""\
Detect ridge lines and output step count and end-to-end distance for
comparison with self-avoiding walk statistics.  Two modes are available:

  - If '-i FILE' is given, image data is loaded from FILE, and the
    number of data points is determined automatically.

  - If '-r' is given, random noise images are generated and used to
    obtain line data.  TYPE selects the noise function and must be 'S'
    (speckle, default) or 'N' (normal); it must be attached to the
    option, as in '-rN'.  '-d' controls how large the generated images
    are.  With '-n', images are generated until NUM data points have
    been created.  '-s' overrides the random number generator seed.

If an OUTFILE is given, CSV data is written to that file; otherwise,
output is to standard output.

The {RIDGETOOL_ENV} environment variable can be set to control the path to
the '{RIDGETOOL_DEFAULT}' program.
"""


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports problems as UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="ridge-saw",
        description="Generate ridge data for self-avoiding walk analysis.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-i", dest="input_path", metavar="FILE", help="Input image file")
    mode.add_argument(
        "-r",
        dest="generate",
        metavar="TYPE",
        nargs="?",
        const="S",
        help="Generate random image data [default: S]",
    )
    parser.add_argument(
        "-d",
        dest="size",
        metavar="SIZE",
        type=int,
        default=None,
        help=f"Size for random tiles [default: {DEFAULT_SIZE}]",
    )
    parser.add_argument(
        "-t",
        dest="scale",
        metavar="SCALE",
        type=float,
        default=None,
        help=f"Ridge detection scale [default: {DEFAULT_SCALE:g}]",
    )
    parser.add_argument(
        "-n",
        dest="target_count",
        metavar="NUM",
        type=int,
        default=None,
        help="Target data point count for random generation",
    )
    parser.add_argument(
        "-s", dest="seed", metavar="SEED", type=int, default=None, help="Random seed"
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="CONFIG",
        default=None,
        help="JSON file with default settings; options override it",
    )
    parser.add_argument(
        "--loop-policy",
        choices=[p.value for p in LoopPolicy],
        default=None,
        help="Sample counting in generate mode [default: accumulate]",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More log output"
    )
    parser.add_argument(
        "-q", "--quiet", action="count", default=0, help="Less log output"
    )
    parser.add_argument("output_path", metavar="OUTFILE", nargs="?", default=None)
    return parser


def attach_optional_type(argv: list[str]) -> list[str]:
    """Turn a bare '-r' into '-rS' so it never swallows the following argument."""
    result = []
    for i, arg in enumerate(argv):
        if arg == "--":
            return result + argv[i:]
        result.append("-rS" if arg == "-r" else arg)
    return result


def build_config(args: argparse.Namespace) -> RidgeSawConfig:
    if args.config is not None:
        config = RidgeSawConfig.from_json(args.config)
    else:
        config = RidgeSawConfig()

    # A mode chosen on the command line replaces the one from the file
    if args.input_path is not None or args.generate is not None:
        config.input_path = args.input_path
        config.generate = (
            Distribution.parse(args.generate) if args.generate is not None else None
        )
    for name in ("size", "scale", "target_count", "seed", "output_path"):
        value = getattr(args, name)
        if value is not None:
            setattr(config, name, value)
    if args.loop_policy is not None:
        config.loop_policy = LoopPolicy(args.loop_policy)
    return config.validate()


def configure_logging(verbosity: int = 0) -> None:
    level = logging.INFO
    if verbosity > 0:
        level = logging.DEBUG
    elif verbosity < 0:
        level = logging.WARNING
    logging.basicConfig(
        stream=sys.stderr, format="%(levelname)s: %(message)s", level=level
    )
    logger.setLevel(level)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    try:
        args = parser.parse_args(attach_optional_type(argv))
        configure_logging(args.verbose - args.quiet)
        config = build_config(args)
        logger.debug("Configuration: %s", config.to_dict())
        run(config)
    except UsageError as err:
        configure_logging()
        logger.error("%s", err)
        parser.print_usage(sys.stderr)
        return err.exit_code
    except ExtractorError as err:
        if err.diagnostics:
            logger.error("%s:\n%s", err, err.diagnostics.rstrip())
        else:
            logger.error("%s", err)
        return err.exit_code
    except RidgeSawError as err:
        logger.error("%s", err)
        return err.exit_code
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
