"""Human-readable, time-ordered unique identifiers.

An identifier is an optional prefix, an underscore, and a UUIDv7 written in
base62 (or base58):

    >>> generate("user")  # doctest: +SKIP
    'user_1BVXue8CnY6eSRFn2bDLF'
    >>> generate()  # doctest: +SKIP
    '1BVXue8CnY6eSRFn2bDLF'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC
from datetime import datetime as dt_datetime
from typing import TYPE_CHECKING, Any, Self
from uuid import UUID, uuid7

from pydantic_core import CoreSchema, core_schema

from human_uuid.codec import BASE62, Alphabet, decode, encode, max_encoded_length
from human_uuid.errors import HumanIdError
from human_uuid.settings import Settings


if TYPE_CHECKING:
    from collections.abc import Callable


logger = logging.getLogger(__name__)

SEPARATOR = "_"

# UUIDv7 (RFC 9562): bytes 0-5 hold a 48-bit Unix timestamp in milliseconds
_RAW_LENGTH = 16
_TIMESTAMP_LENGTH = 6
_MS_PER_SECOND = 1000


@dataclass(frozen=True, slots=True)
class NoPrefix:
    """The identifier has no prefix and no separator."""

    def __repr__(self) -> str:
        return "NO_PREFIX"


@dataclass(frozen=True, slots=True)
class WithPrefix:
    """The identifier starts with ``value`` and a separator.

    ``value`` is used verbatim. It may be empty, which gives a leading
    underscore, and may itself contain underscores.
    """

    value: str

    def __str__(self) -> str:
        return self.value


NO_PREFIX = NoPrefix()

Prefix = NoPrefix | WithPrefix


def _as_prefix(prefix: Prefix | str) -> Prefix:
    if isinstance(prefix, (NoPrefix, WithPrefix)):
        return prefix
    if isinstance(prefix, str):
        return WithPrefix(prefix)
    raise TypeError(f"Prefix must be str, NoPrefix or WithPrefix, got {type(prefix).__name__}")


def _compose(prefix: Prefix, encoded: str) -> str:
    if isinstance(prefix, WithPrefix):
        return f"{prefix.value}{SEPARATOR}{encoded}"
    return encoded


def uuid7_bytes() -> bytes:
    """Return the 16 bytes of a fresh UUIDv7.

    Values made within the same millisecond keep their order through a
    counter in the random bits, so the timestamp stays on the wall clock.
    """
    return uuid7().bytes


class HumanIdGenerator:
    """Builds identifiers from a value source and an alphabet.

    Instances hold no mutable state and can be shared between threads. With
    the default UUIDv7 source, values stay distinct across threads but
    timestamps may tie.

    Args:
        alphabet: Alphabet for the encoded part. Pick one per deployment.
        source: Zero-argument callable returning 16 bytes whose first six
            bytes are a big-endian millisecond timestamp.
    """

    __slots__ = ("_alphabet", "_source")

    def __init__(
        self,
        alphabet: Alphabet = BASE62,
        source: Callable[[], bytes] = uuid7_bytes,
    ) -> None:
        self._alphabet = alphabet
        self._source = source

    @property
    def alphabet(self) -> Alphabet:
        """The alphabet for the encoded part."""
        return self._alphabet

    @property
    def source(self) -> Callable[[], bytes]:
        """The zero-argument callable producing raw values."""
        return self._source

    def _next_raw(self) -> bytes:
        try:
            return self._source()
        except Exception:
            logger.debug("Value source %r failed", self._source, exc_info=True)
            raise

    def generate(self, prefix: Prefix | str = NO_PREFIX) -> str:
        """Return a new identifier string.

        Args:
            prefix: ``NO_PREFIX`` (the default) for a bare encoded value, or a
                prefix. A plain ``str`` is shorthand for ``WithPrefix(str)``,
                so ``""`` yields an identifier starting with ``_``.

        Raises:
            Whatever the value source raises, unchanged.
        """
        prefix = _as_prefix(prefix)
        return _compose(prefix, encode(self._next_raw(), self._alphabet))

    def create(self, prefix: Prefix | str = NO_PREFIX) -> HumanId:
        """Return a new identifier as a :class:`HumanId`."""
        prefix = _as_prefix(prefix)
        return HumanId(prefix, self._next_raw(), self._alphabet)

    def __call__(self, prefix: Prefix | str = NO_PREFIX) -> str:
        """Same as :meth:`generate`."""
        return self.generate(prefix)

    def __repr__(self) -> str:
        """Show the alphabet name and the value source."""
        return f"HumanIdGenerator(alphabet={self._alphabet.name!r}, source={self._source!r})"


_default_generator: HumanIdGenerator | None = None


def configure(settings: Settings | None = None) -> HumanIdGenerator:
    """Build the default generator from ``settings`` (or the environment).

    Raises:
        ConfigurationError: If the configured alphabet is unknown.
    """
    global _default_generator  # noqa: PLW0603
    if settings is None:
        settings = Settings.from_environment()
    _default_generator = HumanIdGenerator(settings.resolve_alphabet())
    logger.debug("Configured default generator with %s alphabet", settings.alphabet)
    return _default_generator


def default_generator() -> HumanIdGenerator:
    """Return the default generator, building it from the environment on first use."""
    if _default_generator is None:
        return configure()
    return _default_generator


def generate(prefix: Prefix | str = NO_PREFIX) -> str:
    """Generate an identifier with the default generator.

    Example:
        >>> generate("user").startswith("user_")
        True
    """
    return default_generator().generate(prefix)


class HumanId:
    """An identifier as a value: prefix, raw UUIDv7 bytes and alphabet.

    Equality and hashing use the prefix and the raw bytes; the alphabet only
    affects how the value is written. Sorting puts unprefixed identifiers
    first, then orders by prefix and by the numeric value of the raw bytes,
    which for UUIDv7 is creation time. Comparing the strings instead is only
    reliable for equal-length encodings.

    Note:
        The ``datetime`` and ``timestamp`` properties assume UUIDv7 layout.
    """

    __slots__ = ("_alphabet", "_encoded", "_prefix", "_raw")

    def __init__(
        self,
        prefix: Prefix | str,
        raw: bytes,
        alphabet: Alphabet = BASE62,
    ) -> None:
        """Initialize a HumanId.

        Raises:
            HumanIdError: If ``raw`` is not 16 bytes long.
        """
        raw = bytes(raw)
        if len(raw) != _RAW_LENGTH:
            raise HumanIdError(f"Raw value must be {_RAW_LENGTH} bytes, got {len(raw)}")
        self._prefix = _as_prefix(prefix)
        self._raw = raw
        self._alphabet = alphabet
        self._encoded: str | None = None

    @property
    def prefix(self) -> Prefix:
        """``NO_PREFIX`` or the ``WithPrefix`` the identifier starts with."""
        return self._prefix

    @property
    def raw(self) -> bytes:
        """The 16 raw bytes."""
        return self._raw

    @property
    def alphabet(self) -> Alphabet:
        """The alphabet the encoded part is written in."""
        return self._alphabet

    @property
    def encoded(self) -> str:
        """The encoded part of the identifier, without prefix."""
        if self._encoded is None:
            self._encoded = encode(self._raw, self._alphabet)
        return self._encoded

    @property
    def uuid(self) -> UUID:
        """The raw bytes as a standard UUID."""
        return UUID(bytes=self._raw)

    @property
    def datetime(self) -> dt_datetime:
        """Creation time taken from the UUIDv7 timestamp, in UTC.

        Millisecond precision. Values from a source that runs ahead of the
        wall clock to stay monotonic report that later time.
        """
        return dt_datetime.fromtimestamp(self.timestamp, tz=UTC)

    @property
    def timestamp(self) -> float:
        """Creation time as Unix seconds, from the 48-bit millisecond timestamp."""
        ms = int.from_bytes(self._raw[:_TIMESTAMP_LENGTH], "big")
        return ms / _MS_PER_SECOND

    def _sort_key(self) -> tuple[bool, str, bytes]:
        # unprefixed first, then prefix text, then raw bytes
        if isinstance(self._prefix, WithPrefix):
            return (True, self._prefix.value, self._raw)
        return (False, "", self._raw)

    def __str__(self) -> str:
        """Return the identifier string."""
        return _compose(self._prefix, self.encoded)

    def __repr__(self) -> str:
        """Return the prefix, encoded part and alphabet name."""
        return f"HumanId({self._prefix!r}, {self.encoded!r}, alphabet={self._alphabet.name!r})"

    def __hash__(self) -> int:
        """Hash by prefix and raw value."""
        return hash((self._prefix, self._raw))

    def __eq__(self, other: object) -> bool:
        """Check equality by prefix and raw value; the alphabet is ignored."""
        if isinstance(other, HumanId):
            return self._prefix == other._prefix and self._raw == other._raw
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        """Compare for sorting (prefix, then raw value)."""
        if isinstance(other, HumanId):
            return self._sort_key() < other._sort_key()
        return NotImplemented

    def __le__(self, other: object) -> bool:
        """Compare for sorting (prefix, then raw value)."""
        if isinstance(other, HumanId):
            return self._sort_key() <= other._sort_key()
        return NotImplemented

    def __gt__(self, other: object) -> bool:
        """Compare for sorting (prefix, then raw value)."""
        if isinstance(other, HumanId):
            return self._sort_key() > other._sort_key()
        return NotImplemented

    def __ge__(self, other: object) -> bool:
        """Compare for sorting (prefix, then raw value)."""
        if isinstance(other, HumanId):
            return self._sort_key() >= other._sort_key()
        return NotImplemented

    def __copy__(self) -> Self:
        """Return self (HumanIds are immutable)."""
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        """Return self (HumanIds are immutable)."""
        return self

    def __reduce__(self) -> tuple[type[Self], tuple[Prefix, bytes, Alphabet]]:
        """Support pickling for multiprocessing, caching, etc."""
        return (type(self), (self._prefix, self._raw, self._alphabet))

    @classmethod
    def from_string(cls, string: str, alphabet: Alphabet = BASE62) -> Self:
        """Parse an identifier string.

        Everything before the last underscore is the prefix, taken as is. A
        string without an underscore has no prefix.

        Raises:
            InvalidCharacter: If the encoded part has a character outside
                ``alphabet``.
            HumanIdError: If the encoded part is empty, too long, or does not
                decode to 16 bytes.
        """
        head, separator, encoded = string.rpartition(SEPARATOR)
        prefix: Prefix = WithPrefix(head) if separator else NO_PREFIX

        if not encoded:
            raise HumanIdError(f"Identifier has an empty encoded part: {string!r}")

        max_length = max_encoded_length(_RAW_LENGTH, alphabet)
        if len(encoded) > max_length:
            raise HumanIdError(
                f"Encoded part must be at most {max_length} characters, got {len(encoded)}"
            )

        raw = decode(encoded, alphabet)
        if len(raw) != _RAW_LENGTH:
            raise HumanIdError(
                f"Encoded part must decode to {_RAW_LENGTH} bytes, got {len(raw)}: {encoded!r}"
            )

        instance = cls(prefix, raw, alphabet)
        instance._encoded = encoded  # noqa: SLF001
        return instance

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,  # noqa: ANN401
        handler: Any,  # noqa: ANN401
    ) -> CoreSchema:
        """Pydantic integration: accept a HumanId or str, serialize to str.

        Strings are parsed with the default generator's alphabet.
        """

        def validate(v: HumanId | str) -> HumanId:
            if isinstance(v, HumanId):
                return v
            if isinstance(v, str):
                return cls.from_string(v, default_generator().alphabet)
            raise HumanIdError(f"Expected HumanId or str, got {type(v).__name__}")

        return core_schema.json_or_python_schema(
            json_schema=core_schema.chain_schema(
                [
                    core_schema.str_schema(),
                    core_schema.no_info_plain_validator_function(validate),
                ]
            ),
            python_schema=core_schema.no_info_plain_validator_function(validate),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


def factory(
    prefix: Prefix | str = NO_PREFIX,
    generator: HumanIdGenerator | None = None,
) -> Callable[[], HumanId]:
    """Create a function that generates new HumanIds with ``prefix``.

    Without ``generator`` the default generator is looked up on each call.

    Example:
        class User(BaseModel):
            id: HumanId = Field(default_factory=factory("user"))
    """
    prefix = _as_prefix(prefix)

    def _factory() -> HumanId:
        return (generator or default_generator()).create(prefix)

    return _factory


def parse(alphabet: Alphabet | None = None) -> Callable[[str], HumanId]:
    """Create a function that parses identifier strings into HumanIds.

    Without ``alphabet`` the default generator's alphabet is used. The parser
    raises HumanIdError on invalid input.

    Example:
        parse_id = parse(BASE58)

        try:
            user_id = parse_id(request.path_params["user_id"])
        except HumanIdError as e:
            print(f"Invalid ID: {e}")
    """

    def _parse(v: str) -> HumanId:
        return HumanId.from_string(
            v, alphabet if alphabet is not None else default_generator().alphabet
        )

    return _parse
