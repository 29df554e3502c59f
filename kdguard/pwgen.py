# pwgen
# (password generators: random, pattern, phrase, deterministic)
#

import itertools
import logging

from . import backend
from .charset import CharacterClass, ALL_CLASSES, UNION_ALPHABET, has_all_classes
from .errors import (InvalidLength, InvalidPattern, InvalidWordCount,
                     MissingSeed, ValidationError, DerivationError)

log = logging.getLogger(__name__)

MIN_LENGTH = 8
MAX_LENGTH = 64
DEFAULT_LENGTH = 16

MIN_WORDS = 3
MAX_WORDS = 20
DEFAULT_WORDS = 4
WORD_SEPARATOR = '-'
DEFAULT_LANGUAGE = 'en'

DETERMINISTIC_LENGTH = 20
DEFAULT_SALT = 'kdguard'
HKDF_INFO = b'kdguard-password'
HKDF_BLOCK_SIZE = 64
MAX_HKDF_BLOCKS = 64
MAX_DETERMINISTIC_ATTEMPTS = 100

MODES = ('random', 'pattern', 'phrase', 'deterministic')


class RandomGenerator:

    """Random characters from all classes, at least one of each."""

    def __init__(self, context):
        self._random = context.random

    def generate(self, length: int = DEFAULT_LENGTH) -> str:
        """Generate random password of `length` characters.

        One character of each class is drawn first, the rest
        is drawn from all classes. The result is shuffled,
        so the mandatory characters end up at random positions.

        :raises InvalidLength: unless MIN_LENGTH <= length <= MAX_LENGTH
        """
        if not MIN_LENGTH <= length <= MAX_LENGTH:
            log.warning("Invalid password length: %d", length)
            raise InvalidLength(f"Password length must be between {MIN_LENGTH} "
                                f"and {MAX_LENGTH}, got: {length}")
        log.info("Generating random password with length: %d", length)
        chars = [self._random.choice(cls.alphabet) for cls in ALL_CLASSES]
        chars += [self._random.choice(UNION_ALPHABET)
                  for _ in range(length - len(ALL_CLASSES))]
        self._random.shuffle(chars)
        return ''.join(chars)


class PatternGenerator:

    """Each character drawn from the class given by pattern letter.

    Pattern letters: U = uppercase, L = lowercase, D = digit, S = special.

    """

    def __init__(self, context):
        self._random = context.random

    @staticmethod
    def parse_pattern(pattern: str) -> list:
        """Convert `pattern` to list of character classes.

        :raises InvalidPattern: for empty pattern or unknown letter
        """
        if not pattern:
            log.warning("Empty pattern")
            raise InvalidPattern("Pattern cannot be empty")
        classes = []
        for ch in pattern:
            try:
                classes.append(CharacterClass.from_pattern_char(ch))
            except ValueError:
                log.warning("Invalid pattern character: %r", ch)
                raise InvalidPattern(f"Invalid pattern character: {ch!r}. "
                                     f"Only U, L, D, S are allowed") from None
        return classes

    def generate(self, pattern: str) -> str:
        classes = self.parse_pattern(pattern)
        log.info("Generating pattern password with %d characters", len(classes))
        return ''.join(self._random.choice(cls.alphabet) for cls in classes)


class PassphraseGenerator:

    """Diceware: words chosen uniformly from a 7776 word list."""

    def __init__(self, context):
        self._context = context
        self._random = context.random

    def generate(self, num_words: int = DEFAULT_WORDS,
                 language: str = DEFAULT_LANGUAGE) -> str:
        """Generate passphrase of `num_words` words joined by hyphen.

        Words are drawn independently, a word may repeat.

        :param num_words: Between MIN_WORDS and MAX_WORDS
        :param language: Tag of a word list present in the context
        :raises InvalidWordCount: for `num_words` out of range
        :raises WordlistUnavailable: when there is no word list for `language`
        """
        if not MIN_WORDS <= num_words <= MAX_WORDS:
            log.warning("Invalid word count: %d", num_words)
            raise InvalidWordCount(f"Word count must be between {MIN_WORDS} "
                                   f"and {MAX_WORDS}, got: {num_words}")
        words = self._context.wordlist(language)
        log.info("Generating phrase password with %d words (%s)", num_words, language)
        return WORD_SEPARATOR.join(self._random.choice(words) for _ in range(num_words))


class DeterministicGenerator:

    """Derive per-service password from a secret seed.

    Same seed, service and salt always give the same password.
    Uses HKDF-SHA256, no randomness is consumed.

    """

    def __init__(self, context=None):
        # The context is accepted for a uniform constructor, it's not used.
        self._context = context

    @staticmethod
    def _info(service: str = None) -> bytes:
        info = HKDF_INFO
        if service:
            info += b'-' + service.encode('utf-8')
        return info

    def _stream(self, secret: bytes, salt: bytes, info: bytes):
        """Yield characters of UNION_ALPHABET mapped from derived bytes.

        Bytes above the largest multiple of alphabet size are skipped,
        so each character is equally likely.

        """
        alphabet_size = len(UNION_ALPHABET)
        limit = 256 - 256 % alphabet_size
        for block in range(MAX_HKDF_BLOCKS):
            block_info = info + b'-' + block.to_bytes(4, 'big')
            for b in backend.hkdf_sha256(secret, salt, block_info, HKDF_BLOCK_SIZE):
                if b < limit:
                    yield UNION_ALPHABET[b % alphabet_size]

    def generate(self, seed: str, service: str = None, salt: str = None) -> str:
        """Generate password of DETERMINISTIC_LENGTH characters.

        :param seed: The secret. Never logged.
        :param service: Service name, e.g. "github"
        :param salt: Optional salt, DEFAULT_SALT if not given
        :raises MissingSeed: for empty seed
        """
        if not seed:
            log.warning("Seed cannot be empty")
            raise MissingSeed("Seed cannot be empty")
        log.info("Generating deterministic password (salt: %s, service: %s)",
                 bool(salt), bool(service))
        stream = self._stream(seed.encode('utf-8'),
                              (salt or DEFAULT_SALT).encode('utf-8'),
                              self._info(service))
        for attempt in range(MAX_DETERMINISTIC_ATTEMPTS):
            candidate = ''.join(itertools.islice(stream, DETERMINISTIC_LENGTH))
            if len(candidate) < DETERMINISTIC_LENGTH:
                break
            if has_all_classes(candidate):
                log.debug("Deterministic password accepted on attempt %d", attempt + 1)
                return candidate
        log.error("Failed to derive deterministic password")
        raise DerivationError("Key derivation did not produce a valid password")


class GenerationRequest:

    """Parameters for one `generate` call.

    Only the parameters of the selected `mode` are used:

    * random: `length`
    * pattern: `pattern`
    * phrase: `words`, `language`
    * deterministic: `seed`, `service`, `salt`

    """

    def __init__(self, mode='random', length=DEFAULT_LENGTH, pattern=None,
                 words=DEFAULT_WORDS, language=DEFAULT_LANGUAGE,
                 seed=None, service=None, salt=None):
        self.mode = mode
        self.length = length
        self.pattern = pattern
        self.words = words
        self.language = language
        self.seed = seed
        self.service = service
        self.salt = salt

    def __repr__(self):
        # seed is secret
        return (f"{self.__class__.__name__}(mode={self.mode!r}, length={self.length!r}, "
                f"pattern={self.pattern!r}, words={self.words!r}, "
                f"language={self.language!r}, service={self.service!r}, "
                f"salt={self.salt!r})")


GENERATOR_BY_MODE = {
    'random': RandomGenerator,
    'pattern': PatternGenerator,
    'phrase': PassphraseGenerator,
    'deterministic': DeterministicGenerator,
}


def generate(request: GenerationRequest, context) -> str:
    """Generate one password according to `request`."""
    try:
        generator = GENERATOR_BY_MODE[request.mode](context)
    except KeyError:
        raise ValidationError(f"Unknown mode {request.mode!r}, "
                              f"choose one of: {', '.join(MODES)}") from None
    if request.mode == 'random':
        return generator.generate(request.length)
    if request.mode == 'pattern':
        return generator.generate(request.pattern)
    if request.mode == 'phrase':
        return generator.generate(request.words, request.language)
    return generator.generate(request.seed, request.service, request.salt)


def generate_batch(request: GenerationRequest, context, count: int = 1) -> list:
    """Generate `count` passwords, each one independently."""
    if count < 1:
        raise ValidationError(f"Count must be at least 1, got: {count}")
    return [generate(request, context) for _ in range(count)]
