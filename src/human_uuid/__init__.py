"""Human-readable, time-ordered unique identifiers - prefix plus encoded UUIDv7."""

from __future__ import annotations

from human_uuid.codec import (
    BASE58,
    BASE62,
    Alphabet,
    decode,
    encode,
    get_alphabet,
    max_encoded_length,
)
from human_uuid.errors import ConfigurationError, HumanIdError, InvalidCharacter
from human_uuid.human_uuid import (
    NO_PREFIX,
    HumanId,
    HumanIdGenerator,
    NoPrefix,
    Prefix,
    WithPrefix,
    configure,
    default_generator,
    factory,
    generate,
    parse,
    uuid7_bytes,
)
from human_uuid.settings import Settings


__all__ = [
    "BASE58",
    "BASE62",
    "NO_PREFIX",
    "Alphabet",
    "ConfigurationError",
    "HumanId",
    "HumanIdError",
    "HumanIdGenerator",
    "InvalidCharacter",
    "NoPrefix",
    "Prefix",
    "Settings",
    "WithPrefix",
    "configure",
    "decode",
    "default_generator",
    "encode",
    "factory",
    "generate",
    "get_alphabet",
    "max_encoded_length",
    "parse",
    "uuid7_bytes",
]
