# Wordlist, CommonPasswordSet
# (word lists for passphrases, known weak passwords)
#

import functools
import logging
import urllib.request
from pathlib import Path

from .errors import WordlistError, WordlistUnavailable

log = logging.getLogger(__name__)

WORDLIST_SIZE = 7776  # 6 ** 5, five dice rolls

DATA_DIR = Path('~/.kdguard')

# Local file or URL per language. Downloaded files are cached in DATA_DIR.
# See: https://www.eff.org/dice, https://github.com/dys2p/wordlists-de
WORDLIST_SOURCES = {
    'en': 'https://www.eff.org/files/2016/07/18/eff_large_wordlist.txt',
    'de': 'https://raw.githubusercontent.com/dys2p/wordlists-de/main/de-7776-v1-diceware.txt',
}
COMMON_PASSWORDS_SOURCE = ('https://raw.githubusercontent.com/danielmiessler/SecLists/'
                           'master/Passwords/Common-Credentials/10k-most-common.txt')


class Wordlist:

    """Immutable list of exactly 7776 words for one language."""

    def __init__(self, language: str, words):
        words = tuple(words)
        if len(words) != WORDLIST_SIZE:
            raise WordlistError(f"Wordlist {language!r} has {len(words)} words, "
                                f"expected {WORDLIST_SIZE}")
        if not all(words):
            raise WordlistError(f"Wordlist {language!r} contains empty words")
        if len(set(words)) != len(words):
            raise WordlistError(f"Wordlist {language!r} contains duplicate words")
        self._language = language
        self._words = words

    def __repr__(self):
        return f"{self.__class__.__name__}({self._language!r}, <{len(self)} words>)"

    def __len__(self):
        return len(self._words)

    def __getitem__(self, index):
        return self._words[index]

    def __iter__(self):
        return iter(self._words)

    def __contains__(self, word):
        return word in self._words

    @property
    def language(self) -> str:
        return self._language


class CommonPasswordSet:

    """Immutable set of known weak passwords, case-insensitive lookup."""

    def __init__(self, passwords=()):
        self._passwords = frozenset(p.lower() for p in passwords if p)

    def __len__(self):
        return len(self._passwords)

    def __contains__(self, password):
        return password.lower() in self._passwords


def parse_lines(lines) -> tuple:
    """Extract one token per non-empty line.

    Accepts plain lists as well as diceware lists
    with dice numbers in the first column (``11111<TAB>abacus``).

    """
    tokens = []
    for line in lines:
        fields = line.split()
        if fields:
            tokens.append(fields[-1])
    return tuple(tokens)


def _is_url(source: str) -> bool:
    return source.startswith(('http://', 'https://'))


def _read_lines(path: Path) -> list:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.readlines()
    except UnicodeDecodeError as e:
        raise WordlistError(f"File {str(path)!r} is not valid UTF-8: {e.reason}") from e


def read_source(source: str, cache_path: Path) -> list:
    """Read lines from local file or URL.

    A URL is downloaded only once, then it's read from `cache_path`.
    Content that is not valid UTF-8 is rejected and never cached.

    """
    if not _is_url(source):
        path = Path(source).expanduser()
        log.info("Reading %s", path)
        try:
            return _read_lines(path)
        except OSError as e:
            raise WordlistError(f"Unable to read {str(path)!r}: {e.strerror}") from e
    cache_path = cache_path.expanduser()
    if cache_path.exists():
        log.info("Reading cached %s", cache_path)
        try:
            return _read_lines(cache_path)
        except OSError as e:
            raise WordlistError(f"Unable to read {str(cache_path)!r}: {e.strerror}") from e
    log.info("Downloading %s", source)
    try:
        with urllib.request.urlopen(source) as f:
            content = f.read()
    except OSError as e:
        raise WordlistError(f"Unable to download {source!r}: {e}") from e
    try:
        text = content.decode('utf-8')
    except UnicodeDecodeError as e:
        raise WordlistError(f"Downloaded {source!r} is not valid UTF-8: {e.reason}") from e
    cache_path.parent.mkdir(0o700, parents=True, exist_ok=True)
    with open(cache_path, 'wb') as f:
        f.write(content)
    return text.splitlines()


@functools.lru_cache(maxsize=None)
def load_wordlist(language: str, source: str = None) -> Wordlist:
    """Load and return the word list for `language`.

    :raises WordlistUnavailable: when no source is known for `language`
    :raises WordlistError: when the list is unreachable or malformed
    """
    source = source or WORDLIST_SOURCES.get(language)
    if not source:
        raise WordlistUnavailable(f"No word list configured for language {language!r}")
    lines = read_source(source, DATA_DIR / f'wordlist_{language}.txt')
    words = tuple(w.lower() for w in parse_lines(lines))
    return Wordlist(language, words)


@functools.lru_cache(maxsize=None)
def load_common_passwords(source: str = None) -> CommonPasswordSet:
    """Load and return the set of common passwords."""
    lines = read_source(source or COMMON_PASSWORDS_SOURCE,
                        DATA_DIR / 'common_passwords.txt')
    return CommonPasswordSet(line.strip() for line in lines)
