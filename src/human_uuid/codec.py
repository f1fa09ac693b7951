"""Arbitrary-alphabet positional encoding of byte strings.

Bytes are read as one big-endian unsigned integer and rewritten in base N,
where N is the size of the alphabet. Leading zero bytes carry no numeric
value, so each one is written as a leading digit-0 character and restored on
decode. This keeps ``decode(encode(data)) == data`` for every input, including
all-zero input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from human_uuid.errors import ConfigurationError, InvalidCharacter


if TYPE_CHECKING:
    from collections.abc import Iterator


# Bitcoin ordering; excludes the look-alike characters '0', 'O', 'I' and 'l'
_BASE58_CHARACTERS = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

# Digits, lowercase, uppercase. This is NOT code-point order: 'A' (digit 36)
# sorts before 'a' (digit 10) when compared as text.
_BASE62_CHARACTERS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


class Alphabet:
    """An ordered set of digit characters for a base-N encoding.

    The character at index ``i`` stands for digit ``i``. The reverse lookup is
    built once at construction; instances are immutable and can be shared
    freely between threads.

    Example:
        >>> hexish = Alphabet("hex", "0123456789abcdef")
        >>> hexish.encode(b"\\x00\\xff")
        '0ff'
    """

    __slots__ = ("_characters", "_digits", "_name")

    def __init__(self, name: str, characters: str) -> None:
        """Create an alphabet.

        Args:
            name: Human-readable name used in error messages.
            characters: The digit characters, digit 0 first.

        Raises:
            ConfigurationError: If fewer than two characters are given or a
                character repeats.
        """
        if len(characters) < 2:
            raise ConfigurationError(
                f"Alphabet must have at least 2 characters, got {len(characters)}"
            )
        digits: dict[str, int] = {}
        for index, char in enumerate(characters):
            if char in digits:
                raise ConfigurationError(
                    f"Alphabet {name!r} repeats character {char!r} at position {index}"
                )
            digits[char] = index
        self._name = name
        self._characters = characters
        self._digits = digits

    @property
    def name(self) -> str:
        """Short name used in configuration and error messages."""
        return self._name

    @property
    def characters(self) -> str:
        """The digit characters, digit 0 first."""
        return self._characters

    @property
    def radix(self) -> int:
        """Number of digits, i.e. the base of the encoding."""
        return len(self._characters)

    @property
    def zero(self) -> str:
        """The character for digit 0, also used to mark leading zero bytes."""
        return self._characters[0]

    def digit(self, char: str) -> int | None:
        """Return the digit value of ``char``, or None if it is not in the alphabet."""
        return self._digits.get(char)

    def encode(self, data: bytes | bytearray | memoryview) -> str:
        """Encode bytes with this alphabet. See :func:`encode`."""
        return encode(data, self)

    def decode(self, text: str) -> bytes:
        """Decode text written in this alphabet. See :func:`decode`."""
        return decode(text, self)

    def __contains__(self, char: object) -> bool:
        """Check whether ``char`` is a digit of this alphabet."""
        return char in self._digits

    def __iter__(self) -> Iterator[str]:
        """Iterate over the digit characters in digit order."""
        return iter(self._characters)

    def __len__(self) -> int:
        """Return the radix."""
        return len(self._characters)

    def __repr__(self) -> str:
        """Return the name and characters."""
        return f"Alphabet({self._name!r}, {self._characters!r})"

    def __eq__(self, other: object) -> bool:
        """Alphabets are equal when their characters are, whatever the name."""
        if isinstance(other, Alphabet):
            return self._characters == other._characters
        return NotImplemented

    def __hash__(self) -> int:
        """Hash by characters, consistent with equality."""
        return hash(self._characters)

    def __copy__(self) -> Self:
        """Return self (alphabets are immutable)."""
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        """Return self (alphabets are immutable)."""
        return self

    def __reduce__(self) -> tuple[type[Self], tuple[str, str]]:
        """Support pickling by name and characters."""
        return (type(self), (self._name, self._characters))


BASE58 = Alphabet("base58", _BASE58_CHARACTERS)
BASE62 = Alphabet("base62", _BASE62_CHARACTERS)

_ALPHABETS = {
    "base58": BASE58,
    "58": BASE58,
    "base62": BASE62,
    "62": BASE62,
}


def get_alphabet(name: str) -> Alphabet:
    """Look up a built-in alphabet by name ('base58', 'base62', '58' or '62').

    Raises:
        ConfigurationError: If the name is not a known alphabet.
    """
    try:
        return _ALPHABETS[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(k for k in _ALPHABETS if k.startswith("base")))
        raise ConfigurationError(
            f"Unknown alphabet {name!r}, expected one of: {known}"
        ) from None


def encode(data: bytes | bytearray | memoryview, alphabet: Alphabet = BASE62) -> str:
    """Encode a byte string as text over ``alphabet``.

    The bytes are treated as a big-endian unsigned integer and converted to
    base ``alphabet.radix``, most significant digit first. Each leading zero
    byte adds one leading ``alphabet.zero`` character, so ``n`` zero bytes
    encode to ``alphabet.zero * n`` and empty input encodes to ``""``.
    """
    data = bytes(data)
    stripped = data.lstrip(b"\x00")
    leading_zeros = len(data) - len(stripped)

    num = int.from_bytes(stripped, "big")
    radix = alphabet.radix
    characters = alphabet.characters

    result: list[str] = []
    while num > 0:
        num, remainder = divmod(num, radix)
        result.append(characters[remainder])

    return alphabet.zero * leading_zeros + "".join(reversed(result))


def decode(text: str, alphabet: Alphabet = BASE62) -> bytes:
    """Decode text produced by :func:`encode` back into the original bytes.

    Raises:
        InvalidCharacter: If ``text`` contains a character outside ``alphabet``.
    """
    stripped = text.lstrip(alphabet.zero)
    leading_zeros = len(text) - len(stripped)

    num = 0
    radix = alphabet.radix
    for offset, char in enumerate(stripped):
        value = alphabet.digit(char)
        if value is None:
            raise InvalidCharacter(char, leading_zeros + offset, alphabet.name)
        num = num * radix + value

    return b"\x00" * leading_zeros + num.to_bytes((num.bit_length() + 7) // 8, "big")


def max_encoded_length(byte_length: int, alphabet: Alphabet = BASE62) -> int:
    """Longest possible encoding of ``byte_length`` bytes with ``alphabet``.

    This is the length of the encoding of ``byte_length`` bytes of 0xFF. Two
    encodings only compare as text in numeric order when they have the same
    length, so this tells callers how wide a fixed-width column must be.
    """
    if byte_length < 0:
        raise ValueError(f"byte_length must be non-negative, got {byte_length}")
    num = (1 << (8 * byte_length)) - 1
    length = 0
    while num > 0:
        num //= alphabet.radix
        length += 1
    return length


__all__ = [
    "BASE58",
    "BASE62",
    "Alphabet",
    "decode",
    "encode",
    "get_alphabet",
    "max_encoded_length",
]
