import itertools
import string

from kdguard.rng import SecureRandomSource
from kdguard.wordlist import Wordlist, WORDLIST_SIZE


class ScriptedBytes:

    """Replacement for randombytes: repeats `script` forever.

    Not random at all, only for structural tests.

    """

    def __init__(self, script=range(256)):
        self._cycle = itertools.cycle(script)
        self.consumed = 0

    def __call__(self, size):
        self.consumed += size
        return bytes(next(self._cycle) for _ in range(size))


def scripted_source(script=range(256)):
    return SecureRandomSource(randombytes=ScriptedBytes(script))


def make_words(count=WORDLIST_SIZE):
    """Distinct lowercase three-letter tokens: aaa, aab, ..."""
    letters = itertools.product(string.ascii_lowercase, repeat=3)
    return [''.join(t) for t in itertools.islice(letters, count)]


def make_wordlist(language='en'):
    return Wordlist(language, make_words())
