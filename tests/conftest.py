"""Pytest configuration for psd-reader tests."""

import pytest

from .psd_reader.utils import RGB_2x2, make_psd


@pytest.fixture
def rgb_document() -> bytes:
    """2x2 8-bit raw RGB document."""
    return make_psd(RGB_2x2, width=2, height=2)
