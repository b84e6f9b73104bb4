"""
Language providers for the preprocessing pipeline.

A provider bundles the language-specific pieces: normalization,
stemming and the default stop-word list.
"""

import asyncio
import logging
import re
from typing import Any, List, Optional, Protocol, runtime_checkable

from Sastrawi.Stemmer.StemmerFactory import StemmerFactory

from config.defaults import ENGLISH_STOP_WORDS, STOP_WORDS

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[^\w\s]")


@runtime_checkable
class LanguageProvider(Protocol):
    """Protocol for language-specific text handling."""

    locale: str

    def normalize(self, text: str) -> str:
        """Lowercase and strip punctuation."""
        ...

    def stem(self, word: str) -> str:
        """Reduce a word to its root form."""
        ...

    def get_stop_words(self) -> List[str]:
        """Default stop words for this language."""
        ...


class IndonesianProvider:
    """
    Indonesian provider backed by the Sastrawi stemmer.

    Building the stemmer loads its root-word dictionary, so it is created
    on first use. Call ``await init()`` at startup to build it off the
    event loop ahead of the first query.
    """

    locale = "id"

    def __init__(self):
        self._stemmer: Optional[Any] = None

    async def init(self) -> None:
        if self._stemmer is None:
            self._stemmer = await asyncio.to_thread(self._create_stemmer)

    def is_ready(self) -> bool:
        return self._stemmer is not None

    @staticmethod
    def _create_stemmer():
        stemmer = StemmerFactory().create_stemmer()
        logger.info("Sastrawi stemmer initialized")
        return stemmer

    def normalize(self, text: str) -> str:
        return _PUNCTUATION.sub("", text.lower())

    def stem(self, word: str) -> str:
        if self._stemmer is None:
            self._stemmer = self._create_stemmer()
        return self._stemmer.stem(word) or word

    def get_stop_words(self) -> List[str]:
        return list(STOP_WORDS)


class EnglishProvider:
    """English provider with suffix-stripping stemming."""

    locale = "en"

    def normalize(self, text: str) -> str:
        return _PUNCTUATION.sub("", text.lower())

    def stem(self, word: str) -> str:
        if len(word) <= 3:
            return word

        result = word.lower()
        if result.endswith("ies"):
            return result[:-3] + "y"
        if result.endswith("s"):
            result = result[:-1]

        if result.endswith("ing"):
            result = result[:-3]
        elif result.endswith("ed"):
            result = result[:-2]
        else:
            return result

        # running → run, stopped → stop
        if len(result) > 3 and result[-1] == result[-2]:
            result = result[:-1]
        return result

    def get_stop_words(self) -> List[str]:
        return list(ENGLISH_STOP_WORDS)


def get_provider(language: str) -> LanguageProvider:
    """Provider for a language code (``id`` or ``en``)."""
    if language.lower().startswith("en"):
        return EnglishProvider()
    return IndonesianProvider()
