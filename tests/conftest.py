"""Shared test fixtures and Hypothesis strategies."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from hypothesis import strategies as st

import human_uuid.human_uuid as human_uuid_module
from human_uuid import BASE58, BASE62, HumanIdGenerator


if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


# =============================================================================
# Fixed Values
# =============================================================================

# UUIDv7 layout: 48-bit ms timestamp 0x00061234abcd, version 7, variant 10
FIXED_RAW = bytes.fromhex("00061234abcd7123" "8456789abcdef012")

BASE58_CHARS = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BASE62_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


def fixed_source(raw: bytes = FIXED_RAW) -> Callable[[], bytes]:
    """A value source that always returns ``raw``."""

    def _source() -> bytes:
        return raw

    return _source


# =============================================================================
# Hypothesis Strategies
# =============================================================================

alphabet_strategy = st.sampled_from([BASE58, BASE62])

bytes_strategy = st.binary(min_size=0, max_size=32)

raw_strategy = st.binary(min_size=16, max_size=16)

# Any text, including empty and underscores; prefixes are never validated
prefix_strategy = st.text(max_size=40)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(params=[BASE58, BASE62], ids=["base58", "base62"])
def alphabet(request: pytest.FixtureRequest):
    return request.param


@pytest.fixture
def fixed_generator(alphabet) -> HumanIdGenerator:
    return HumanIdGenerator(alphabet, fixed_source())


@pytest.fixture
def clean_default(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start without a cached default generator or alphabet override."""
    monkeypatch.delenv("HUMAN_UUID_ALPHABET", raising=False)
    monkeypatch.setattr(human_uuid_module, "_default_generator", None)
    yield
