import argparse
import logging
from typing import Optional

from psd_reader.api.psd_reader import PSDReader
from psd_reader.errors import PSDReaderError
from psd_reader.version import __version__

logger = logging.getLogger(__name__)

CHUNK_NAMES = (
    "header",
    "color mode data",
    "image resources",
    "layer and mask",
    "image data",
)


def _color(value: str) -> tuple:
    try:
        color = tuple(int(x) for x in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError("expected R,G,B, got %r" % value)
    if len(color) != 3:
        raise argparse.ArgumentTypeError("expected R,G,B, got %r" % value)
    return color


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="psd-reader command line utility.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export the merged image")
    export_parser.add_argument("input_file", help="Input PSD file")
    export_parser.add_argument("output_file", help="Output image file")
    export_parser.add_argument("--gamma", type=float, default=1.0, help="Inverse gamma.")
    export_parser.add_argument(
        "--gamma32", type=float, default=None, help="Inverse gamma of 32-bit images."
    )
    export_parser.add_argument(
        "--duotone", type=_color, default=(255, 255, 255), help="Duotone color as R,G,B."
    )
    export_parser.add_argument(
        "--ignore-alpha", action="store_true", help="Discard the alpha channel."
    )
    export_parser.add_argument(
        "--no-dematte", action="store_true", help="Keep the matte of transparent images."
    )

    info_parser = subparsers.add_parser("info", help="Show the document info")
    info_parser.add_argument("input_file", help="Input PSD file")

    resources_parser = subparsers.add_parser("resources", help="List image resources")
    resources_parser.add_argument("input_file", help="Input PSD file")

    return parser.parse_args(argv)


def _print_info(psd: PSDReader) -> None:
    info = psd.info
    print("size:        %dx%d" % (info.width, info.height))
    print("channels:    %d%s" % (info.channels, " (alpha)" if info.has_alpha else ""))
    print("depth:       %d" % info.depth)
    print("color mode:  %s" % info.color_desc)
    print("compression: %s" % info.compression_desc)
    for name, chunk in zip(CHUNK_NAMES, psd.chunks):
        print("%-16s offset=%-10d len=%d" % (name, chunk.offset, chunk.length))


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    if args.verbose:
        logging.getLogger("psd_reader").setLevel(logging.DEBUG)
    else:
        logging.getLogger("psd_reader").setLevel(logging.INFO)

    try:
        if args.command == "export":
            options = dict(
                gamma=args.gamma,
                duotone_color=args.duotone,
                ignore_alpha=args.ignore_alpha,
                dematte=not args.no_dematte,
            )
            if args.gamma32 is not None:
                options["gamma32"] = args.gamma32
            psd = PSDReader.open(args.input_file, **options)
            psd.topil().save(args.output_file)

        elif args.command == "info":
            psd = PSDReader.open(args.input_file, passive=True)
            psd.read_info()
            _print_info(psd)

        elif args.command == "resources":
            psd = PSDReader.open(args.input_file, passive=True)
            psd.read_info()
            for entry in psd.resources:
                print(
                    "%-6d %-24r offset=%-10d len=%d"
                    % (entry.id, entry.name, entry.range.offset, entry.range.length)
                )
    except (OSError, PSDReaderError) as e:
        logger.error(str(e))
        return 1

    return None


if __name__ == "__main__":
    main()
