# Context
# (read-only data shared by generators and analyzer)
#

from types import MappingProxyType

from .rng import SecureRandomSource
from .wordlist import CommonPasswordSet
from .errors import WordlistUnavailable


class Context:

    """Wordlists, common passwords and random source.

    Constructed once at startup and passed to generators.
    Nothing here is modified after construction.

    """

    def __init__(self, wordlists=(), common_passwords=None, random_source=None):
        self._wordlists = MappingProxyType({wl.language: wl for wl in wordlists})
        self._common_passwords = common_passwords or CommonPasswordSet()
        self._random = random_source or SecureRandomSource()

    @property
    def wordlists(self):
        return self._wordlists

    @property
    def common_passwords(self) -> CommonPasswordSet:
        return self._common_passwords

    @property
    def random(self) -> SecureRandomSource:
        return self._random

    def wordlist(self, language: str):
        """Return the Wordlist for `language`.

        :raises WordlistUnavailable: if no list was loaded for the language
        """
        try:
            return self._wordlists[language]
        except KeyError:
            raise WordlistUnavailable(f"No wordlist loaded for language {language!r}") from None
