"""
Configuration objects.

All options are validated when the object is built; an out-of-range value
raises :py:class:`~psd_reader.errors.ConfigurationError` instead of being
silently replaced by a default.

Example::

    from attrs import evolve
    from psd_reader.config import ConversionOptions

    options = ConversionOptions(gamma=1 / 2.2)
    no_alpha = evolve(options, ignore_alpha=True)
"""

import logging
import sys

from attrs import define, field

from psd_reader.errors import ConfigurationError
from psd_reader.validators import positive, rgb

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)


def guess_gamma() -> float:
    """
    Guess the display gamma, as an inverse value: 1/1.8 on macOS, 1/2.2 on
    every other platform. Only an approximation, use it when the display
    gamma is unknown.
    """
    return 1 / (1.8 if sys.platform == "darwin" else 2.2)


def _to_float(value: object) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigurationError("Expected a number, got %r" % (value,))


def _to_rgb(value: object) -> tuple:
    try:
        return tuple(value)  # type: ignore[call-overload]
    except TypeError:
        raise ConfigurationError("Expected an (r, g, b) triple, got %r" % (value,))


def _to_bool(value: object) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError("Expected a boolean, got %r" % (value,))
    return value


@define(frozen=True)
class ConversionOptions:
    """
    Settings of a single RGBA conversion.

    .. py:attribute:: gamma

        Inverse gamma applied to 8 and 16-bit images, e.g. ``1 / 2.2``.
        ``1`` leaves samples untouched.

    .. py:attribute:: gamma32

        Inverse gamma applied to 32-bit images.

    .. py:attribute:: duotone_color

        ``(r, g, b)`` color duotone images are tinted towards.

    .. py:attribute:: ignore_alpha

        Discard the alpha channel and output opaque pixels.

    .. py:attribute:: dematte

        Remove the matte color baked into images with an alpha channel.

    .. py:attribute:: matte_color

        ``(r, g, b)`` matte to remove. The merged image is composited onto
        white.
    """

    gamma: float = field(default=1.0, converter=_to_float, validator=positive(ConfigurationError))
    gamma32: float = field(
        factory=guess_gamma, converter=_to_float, validator=positive(ConfigurationError)
    )
    duotone_color: tuple = field(
        default=WHITE, converter=_to_rgb, validator=rgb(ConfigurationError)
    )
    ignore_alpha: bool = field(default=False, converter=_to_bool)
    dematte: bool = field(default=True, converter=_to_bool)
    matte_color: tuple = field(
        default=WHITE, converter=_to_rgb, validator=rgb(ConfigurationError)
    )


@define(frozen=True)
class ReaderConfig(ConversionOptions):
    """
    Options of :py:class:`~psd_reader.api.psd_reader.PSDReader`.

    On top of :py:class:`.ConversionOptions`:

    .. py:attribute:: to_rgba

        Convert to RGBA right after the channels are decompressed.

    .. py:attribute:: passive

        Keep the buffer but do not parse it until
        :py:meth:`~psd_reader.api.psd_reader.PSDReader.parse` is called.

    .. py:attribute:: encoding

        Encoding of the resource names.
    """

    to_rgba: bool = field(default=True, converter=_to_bool)
    passive: bool = field(default=False, converter=_to_bool)
    encoding: str = "macroman"

    def conversion_options(self) -> ConversionOptions:
        return ConversionOptions(
            gamma=self.gamma,
            gamma32=self.gamma32,
            duotone_color=self.duotone_color,
            ignore_alpha=self.ignore_alpha,
            dematte=self.dematte,
            matte_color=self.matte_color,
        )


@define(frozen=True)
class SchedulerConfig:
    """
    Settings of :py:class:`~psd_reader.scheduler.CooperativeScheduler`.

    .. py:attribute:: block_size

        Maximum units of work per slice.

    .. py:attribute:: time_slice_ms

        Wall-clock budget of a slice in milliseconds.

    .. py:attribute:: yield_delay_ms

        Pause between two slices in milliseconds.
    """

    block_size: int = field(default=1 << 21, validator=positive(ConfigurationError))
    time_slice_ms: float = field(
        default=16.0, converter=_to_float, validator=positive(ConfigurationError)
    )
    yield_delay_ms: float = field(default=8.0, converter=_to_float)

    @yield_delay_ms.validator
    def _validate_delay(self, attribute, value):
        if value < 0:
            raise ConfigurationError("'yield_delay_ms' must not be negative, got %r" % value)
