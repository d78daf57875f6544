"""
Validation functions for attr.
"""

from typing import Any, Container

import attr

__all__ = ["in_", "range_", "positive", "rgb"]


@attr.s(repr=False, slots=True, hash=True)
class _RangeValidator:
    minimum = attr.ib()
    maximum = attr.ib()
    exc = attr.ib(default=ValueError)

    def __call__(self, inst: Any, attribute: Any, value: Any) -> None:
        try:
            range_options = self.minimum <= value and value <= self.maximum
        except TypeError:
            range_options = False

        if not range_options:
            raise self.exc(
                "'{name}' must be in range [{minimum!r}, {maximum!r}], got {value!r}".format(
                    name=attribute.name,
                    minimum=self.minimum,
                    maximum=self.maximum,
                    value=value,
                )
            )

    def __repr__(self) -> str:
        return "<range_ validator with [{minimum!r}, {maximum!r}]>".format(
            minimum=self.minimum, maximum=self.maximum
        )


@attr.s(repr=False, slots=True, hash=True)
class _InValidator:
    options = attr.ib()
    exc = attr.ib(default=ValueError)

    def __call__(self, inst: Any, attribute: Any, value: Any) -> None:
        try:
            in_options = value in self.options
        except TypeError:
            in_options = False

        if not in_options:
            raise self.exc(
                "'{name}' must be in {options!r}, got {value!r}".format(
                    name=attribute.name, options=tuple(self.options), value=value
                )
            )

    def __repr__(self) -> str:
        return "<in_ validator with options {options!r}>".format(options=self.options)


def range_(minimum: Any, maximum: Any, exc: type = ValueError) -> _RangeValidator:
    """
    A validator that raises ``exc`` (a :exc:`ValueError` by default) if the
    initializer is called with a value that does not belong in the
    [minimum, maximum] range. The check is performed using
    ``minimum <= value and value <= maximum``
    """
    return _RangeValidator(minimum, maximum, exc)


def in_(options: Container, exc: type = ValueError) -> _InValidator:
    """
    A validator that raises ``exc`` if the initializer is called with a value
    that does not belong in ``options``.
    """
    return _InValidator(options, exc)


def positive(exc: type = ValueError) -> Any:
    """A validator for strictly positive numbers."""

    def _validate(inst: Any, attribute: Any, value: Any) -> None:
        try:
            ok = value > 0
        except TypeError:
            ok = False
        if not ok:
            raise exc("'%s' must be positive, got %r" % (attribute.name, value))

    return _validate


def rgb(exc: type = ValueError) -> Any:
    """A validator for ``(r, g, b)`` triples of 8-bit integers."""

    def _validate(inst: Any, attribute: Any, value: Any) -> None:
        if len(value) != 3 or not all(
            isinstance(v, int) and 0 <= v <= 255 for v in value
        ):
            raise exc("'%s' must be three integers in [0, 255], got %r" % (attribute.name, value))

    return _validate
