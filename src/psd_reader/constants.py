"""
Various constants for psd_reader
"""

from enum import IntEnum

#: Signature of the file header.
SIGNATURE = b"8BPS"

#: Signature of an image resource record.
RESOURCE_SIGNATURE = b"8BIM"

#: Size of the fixed file header in bytes.
HEADER_SIZE = 26


class ColorMode(IntEnum):
    """
    Color mode.
    """

    BITMAP = 0
    GRAYSCALE = 1
    INDEXED = 2
    RGB = 3
    CMYK = 4
    MULTICHANNEL = 7
    DUOTONE = 8
    LAB = 9

    @staticmethod
    def channels(value: int, alpha: bool = False) -> int:
        return {
            ColorMode.BITMAP: 1,
            ColorMode.GRAYSCALE: 1,
            ColorMode.INDEXED: 1,
            ColorMode.RGB: 3,
            ColorMode.CMYK: 4,
            ColorMode.MULTICHANNEL: 3,
            ColorMode.DUOTONE: 1,
            ColorMode.LAB: 3,
        }.get(value, 1) + alpha

    @staticmethod
    def supports_alpha(value: int) -> bool:
        """Whether an extra trailing channel is treated as transparency."""
        return value in (
            ColorMode.GRAYSCALE,
            ColorMode.RGB,
            ColorMode.CMYK,
            ColorMode.LAB,
        )

    @staticmethod
    def describe(value: int) -> str:
        return {
            ColorMode.BITMAP: "Bitmap",
            ColorMode.GRAYSCALE: "Grayscale",
            ColorMode.INDEXED: "Indexed",
            ColorMode.RGB: "RGB",
            ColorMode.CMYK: "CMYK",
            ColorMode.MULTICHANNEL: "Multichannel",
            ColorMode.DUOTONE: "Duotone",
            ColorMode.LAB: "Lab",
        }.get(value, "Unknown")


class Compression(IntEnum):
    """
    Compression modes.

    Compression. 0 = Raw Data, 1 = RLE compressed, 2 = ZIP without prediction,
    3 = ZIP with prediction.
    """

    RAW = 0
    RLE = 1
    ZIP = 2
    ZIP_WITH_PREDICTION = 3

    @staticmethod
    def describe(value: int) -> str:
        return {
            Compression.RAW: "Uncompressed",
            Compression.RLE: "RLE (PackBits)",
            Compression.ZIP: "ZIP (unsupported)",
            Compression.ZIP_WITH_PREDICTION: "ZIP with prediction (unsupported)",
        }.get(value, "Unknown")


class Resource(IntEnum):
    """
    Image resource keys.

    Only the keys the reader looks at or reports are listed here.
    """

    RESOLUTION_INFO = 1005
    ALPHA_NAMES_PASCAL = 1006
    BACKGROUND_COLOR = 1010
    DUOTONE_IMAGE_INFO = 1018
    THUMBNAIL_RESOURCE_PS4 = 1033
    THUMBNAIL_RESOURCE = 1036
    ICC_PROFILE = 1039
    ALPHA_NAMES_UNICODE = 1045
    INDEXED_COLOR_TABLE_COUNT = 1046
    TRANSPARENCY_INDEX = 1047
    VERSION_INFO = 1057
    XMP_METADATA = 1060
    ALTERNATE_DUOTONE_COLORS = 1066
