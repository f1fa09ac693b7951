"""Exceptions raised by human_uuid."""

from __future__ import annotations


class HumanIdError(ValueError):
    """Raised when encoding, decoding or parsing a human ID fails."""


class InvalidCharacter(HumanIdError):
    """Raised when decoding text that contains a character outside the alphabet."""

    def __init__(self, character: str, position: int, alphabet: str) -> None:
        self.character = character
        self.position = position
        self.alphabet = alphabet
        super().__init__(
            f"Character {character!r} at position {position} is not in the {alphabet} alphabet"
        )

    def __reduce__(self) -> tuple[type[InvalidCharacter], tuple[str, int, str]]:
        return (type(self), (self.character, self.position, self.alphabet))


class ConfigurationError(HumanIdError):
    """Raised for an invalid alphabet definition or an unknown alphabet name."""
