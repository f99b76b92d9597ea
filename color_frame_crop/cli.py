"""Command-line interface for color frame cropping."""

import argparse
import logging
import sys
from pathlib import Path

DEFAULT_DELIM = "_"
PLAYER_CHOICES = ["1P", "2P", "1P2P", "both"]


def write_error(output_path: str | None, message: str) -> None:
    """Write error message to an error file next to the requested output."""
    if output_path:
        error_path = output_path + ".err"
        with open(error_path, "w") as f:
            f.write(message)


def detect_delim(filename: str) -> str | None:
    """Detect delimiter from filename by finding most common separator."""
    stem = Path(filename).stem
    for delim in ["_", "-", "."]:
        if delim in stem:
            return delim
    return None


def build_output_filename(input_path: str, prefix: str, suffix: str, delim: str) -> str:
    p = Path(input_path)
    parts = []
    if prefix:
        parts.append(prefix)
    parts.append(p.stem)
    if suffix:
        parts.append(suffix)
    return str(p.with_stem(delim.join(parts)))


def region_output_filename(output_path: str, player: str, delim: str) -> str:
    """Insert the region name before the extension, e.g. board_1P.png."""
    p = Path(output_path)
    return str(p.with_stem(f"{p.stem}{delim}{player}"))


def add_crop_arguments(parser: argparse.ArgumentParser) -> None:
    """Add frame cropping arguments to a parser."""
    parser.add_argument("input", help="Input screenshot file")
    parser.add_argument("-o", "--output", help="Output filename")
    parser.add_argument(
        "-p",
        "--player",
        choices=PLAYER_CHOICES,
        default="1P2P",
        help="Region to crop: 1P (blue frame), 2P (red frame), 1P2P (red frame inside "
        "the 1P crop, default) or both (all three, one file each)",
    )
    parser.add_argument("--prefix", default="", help="Prefix for output filename")
    parser.add_argument("--suffix", default="crop", help="Suffix for output filename")
    parser.add_argument(
        "--delim",
        help="Delimiter between prefix/name/suffix (auto-detected from filename if not set)",
    )
    parser.add_argument(
        "--default-delim",
        default=DEFAULT_DELIM,
        help=f"Default delimiter if not detected (default: '{DEFAULT_DELIM}')",
    )
    parser.add_argument(
        "--debug-dir",
        help="Directory to save mask and boundary visualization images",
    )
    parser.add_argument(
        "--coords",
        action="store_true",
        help="Output crop coordinates (0.0-1.0) to text file instead of cropped image",
    )
    parser.add_argument(
        "--min-ratio",
        type=float,
        help="Fraction of a row/column that must be frame-colored (default: 0.7)",
    )
    parser.add_argument(
        "--search-x",
        type=float,
        help="Horizontal search margin as a fraction of width (default: 0.1)",
    )
    parser.add_argument(
        "--search-y",
        type=float,
        help="Vertical search margin as a fraction of height (default: 0.05)",
    )
    parser.add_argument(
        "--top-trim",
        type=float,
        help="Extra share of the height trimmed below a detected top frame (default: 0.02)",
    )
    parser.add_argument(
        "--config",
        help="JSON crop configuration (inline JSON string or path to .json file). "
        "Individual options above override it.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print progress messages")


def parse_crop_config(config_arg: str | None):
    """Parse crop config from CLI argument.

    Args:
        config_arg: Either inline JSON string or path to .json file

    Returns:
        CropOptions object (defaults if not provided)
    """
    from .models import CropOptions

    if not config_arg:
        return CropOptions()

    # Check if it looks like a file path
    config_path = Path(config_arg)
    if config_path.exists() and config_path.suffix == ".json":
        return CropOptions.from_file(config_path)

    # Try parsing as inline JSON
    try:
        return CropOptions.from_json(config_arg)
    except Exception as e:
        raise ValueError(f"Invalid --config: {e}")


def build_options(args: argparse.Namespace):
    """Combine --config with individual overrides."""
    options = parse_crop_config(args.config)
    overrides = {
        "min_ratio": args.min_ratio,
        "search_ratio_x": args.search_x,
        "search_ratio_y": args.search_y,
        "additional_top_crop_ratio": args.top_trim,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(options, name, value)
    if options.debug and not args.debug_dir:
        raise ValueError('"debug" in --config requires --debug-dir')
    options.debug = bool(args.debug_dir)
    if args.verbose:
        options.log_callback = print
    options.validate()
    return options


def load_image(path: str):
    """Read an image file as an RGBA array."""
    import cv2

    from .exceptions import ImageReadError

    img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ImageReadError(path)
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)


def write_result(result, output_path: str, coords: bool, label: bool = False) -> None:
    """Write a successful crop as an image, or its fractional coordinates.

    Coordinates are fractions of the input screenshot. With label set, the
    block is preceded by the region name.
    """
    import cv2

    from .visualizer import to_bgr

    if coords:
        left, right, top, bottom = result.fractional_bounds()
        output = f"{left}\n{right}\n{top}\n{bottom}"
        if label:
            output = f"{result.player.value}\n{output}"
        if output_path == "-":
            print(output)
        else:
            with open(output_path, "w") as f:
                f.write(output + "\n")
    else:
        cv2.imwrite(output_path, to_bgr(result.image))


def run_crop(args: argparse.Namespace) -> None:
    """Run frame cropping on a screenshot."""
    from .cropper import crop_both_players, crop_player
    from .exceptions import FrameCropError
    from .models import Player

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    error_output = args.output if args.output else None

    try:
        options = build_options(args)
    except ValueError as e:
        write_error(error_output, str(e))
        sys.exit(str(e))

    visualizer = None
    if args.debug_dir:
        from .visualizer import DebugVisualizer

        visualizer = DebugVisualizer(args.debug_dir)

    if args.output:
        output_path = args.output
    elif args.coords:
        output_path = "-"
    else:
        delim = args.delim or detect_delim(args.input) or args.default_delim
        output_path = build_output_filename(args.input, args.prefix, args.suffix, delim)

    try:
        img = load_image(args.input)
        if args.player == "both":
            compound = crop_both_players(img, options, visualizer)
            results = list(compound.regions.values())
        else:
            results = [crop_player(img, Player(args.player), options, visualizer)]
    except FrameCropError as e:
        write_error(error_output, e.user_message)
        sys.exit(e.user_message)
    except Exception as e:
        msg = f"Unexpected error: {e}"
        write_error(error_output, msg)
        sys.exit(msg)

    errors = []
    for result in results:
        if not result.success:
            errors.append(f"{result.player.value}: {result.message}")
            continue
        path = output_path
        if len(results) > 1 and output_path != "-":
            delim = args.delim or detect_delim(output_path) or args.default_delim
            path = region_output_filename(output_path, result.player.value, delim)
        write_result(result, path, args.coords, label=len(results) > 1 and path == "-")

    if errors:
        message = "\n".join(errors)
        write_error(error_output, message)
        sys.exit(message)


def run_show_config(args: argparse.Namespace) -> None:
    """Print the default crop configuration as JSON."""
    from .models import CropOptions

    print(CropOptions.default_json())


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Puzzle board frame detection and cropping tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  color-frame-crop crop board.png                    Crop the combined 1P2P region
  color-frame-crop crop board.png -p both            Crop 1P, 2P and 1P2P
  color-frame-crop crop board.png --coords -o out.txt  Output coordinates
  color-frame-crop config > crop.json                Dump default configuration
""",
    )
    subparsers = parser.add_subparsers(dest="command")

    crop_parser = subparsers.add_parser(
        "crop",
        help="Detect and remove colored frames from a screenshot",
    )
    add_crop_arguments(crop_parser)
    crop_parser.set_defaults(func=run_crop)

    config_parser = subparsers.add_parser("config", help="Print default crop configuration")
    config_parser.set_defaults(func=run_show_config)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)
    args.func(args)


if __name__ == "__main__":
    main()
