"""Configuration for the default human ID generator."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from human_uuid.codec import Alphabet, get_alphabet


logger = logging.getLogger(__name__)

ALPHABET_ENV_VAR = "HUMAN_UUID_ALPHABET"


@dataclass(frozen=True)
class Settings:
    """Settings for the module-level :func:`human_uuid.generate`.

    A deployment should pick one alphabet and keep it: base58 and base62
    identifiers cannot be told apart reliably by looking at them.
    """

    alphabet: str = "base62"

    def resolve_alphabet(self) -> Alphabet:
        """Return the configured alphabet.

        Raises:
            ConfigurationError: If the alphabet name is unknown.
        """
        return get_alphabet(self.alphabet)

    @classmethod
    def from_environment(cls) -> Settings:
        """Load settings from environment variables."""
        settings = cls(alphabet=os.getenv(ALPHABET_ENV_VAR, cls.alphabet))
        logger.debug("Loaded settings from environment: alphabet=%s", settings.alphabet)
        return settings
