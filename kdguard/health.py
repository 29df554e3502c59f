# StrengthAnalyzer
# (password health check)
#

import math
import logging

from .charset import CharacterClass, ALL_CLASSES, classes_present
from .errors import EmptyPassword
from .wordlist import CommonPasswordSet

log = logging.getLogger(__name__)

WEAK = 'Weak'
MEDIUM = 'Medium'
STRONG = 'Strong'
VERY_STRONG = 'Very Strong'

# Keyboard rows, checked in both directions
KEYBOARD_ROWS = (
    '1234567890',
    'qwertyuiop',
    'qwertzuiop',
    'asdfghjkl',
    'zxcvbnm',
    'yxcvbnm',
)

# Longest substring checked for back to back repetition
REPEAT_MAX_SIZE = 16

# (warning, suggestion) for each finding, in the order they are reported
FINDINGS = {
    'common': ("Matches a common password",
               "Never use a password from a list of common passwords"),
    'short': ("Password is too short",
              "Use at least 8 characters, better 16 or more"),
    CharacterClass.LOWER: ("No lowercase letters", "Add lowercase letters"),
    CharacterClass.UPPER: ("No uppercase letters", "Add uppercase letters"),
    CharacterClass.DIGIT: ("No digits", "Add digits"),
    CharacterClass.SPECIAL: ("No special characters", "Add special characters like !@#$%"),
    'sequence': ("Contains a sequential run (e.g. abc, 321)",
                 "Avoid simple sequences of letters or digits"),
    'keyboard': ("Contains a keyboard pattern (e.g. qwe, asdf)",
                 "Avoid runs of adjacent keys"),
    'repetition': ("Contains repeated characters or substrings",
                   "Avoid repeating characters or groups of characters"),
}


#########################
# Heuristic predicates  #
#########################

def _is_step(a: str, b: str, step: int) -> bool:
    if a.isdigit() != b.isdigit() or not (a.isalnum() and b.isalnum()):
        return False
    if a.isascii() and b.isascii():
        return ord(b) - ord(a) == step
    return False


def has_sequence(password: str, run: int = 3) -> bool:
    """Check for `run` consecutive ascending or descending letters/digits.

    Letters are compared case-insensitive: "aBc" and "CBA" are sequences.

    """
    text = password.lower()
    for step in (1, -1):
        count = 1
        for a, b in zip(text, text[1:]):
            count = count + 1 if _is_step(a, b, step) else 1
            if count >= run:
                return True
    return False


def has_keyboard_sequence(password: str, run: int = 3) -> bool:
    """Check for `run` adjacent keys of a keyboard row, e.g. "qwe", "lkj"."""
    text = password.lower()
    for i in range(len(text) - run + 1):
        chunk = text[i:i + run]
        for row in KEYBOARD_ROWS:
            if chunk in row or chunk[::-1] in row:
                return True
    return False


def has_repetition(password: str, run: int = 3, max_size: int = REPEAT_MAX_SIZE) -> bool:
    """Check for a character repeated `run` times in a row ("aaa"),
    or a substring of up to `max_size` characters repeated back to back
    ("abab", "123123")."""
    count = 1
    for a, b in zip(password, password[1:]):
        count = count + 1 if a == b else 1
        if count >= run:
            return True
    for size in range(2, min(max_size, len(password) // 2) + 1):
        for i in range(len(password) - 2 * size + 1):
            if password[i:i + size] == password[i + size:i + 2 * size]:
                return True
    return False


def estimate_entropy(password: str) -> float:
    """Length * log2(size of alphabet actually used)."""
    alphabet_size = sum(len(cls.alphabet) for cls in classes_present(password))
    if alphabet_size == 0:
        return 0.0
    return len(password) * math.log2(alphabet_size)


##################
# Scoring policy #
##################

class ScoringPolicy:

    """Breakpoints and point values of the scoring model.

    Step tables are tuples of (threshold, points), checked in order;
    the first threshold that the value is lower than wins,
    otherwise the maximum applies.

    """

    MIN_LENGTH = 8

    LENGTH_STEPS = ((8, 0), (13, 10), (17, 20))
    LENGTH_MAX = 25

    DIVERSITY_PER_CLASS = 5
    DIVERSITY_ALL_BONUS = 10

    COMPLEXITY_MAX = 25
    SEQUENCE_PENALTY = 10
    KEYBOARD_PENALTY = 10
    REPETITION_PENALTY = 10

    ENTROPY_STEPS = ((30.0, 5), (40.0, 10), (50.0, 15))
    ENTROPY_MAX = 20

    COMMON_PASSWORD_MAX_TOTAL = 20

    # (upper bound inclusive, rating)
    RATING_BANDS = ((40, WEAK), (60, MEDIUM), (80, STRONG), (100, VERY_STRONG))

    @staticmethod
    def _step(value, steps, maximum):
        for threshold, points in steps:
            if value < threshold:
                return points
        return maximum

    def length_score(self, length: int) -> int:
        return self._step(length, self.LENGTH_STEPS, self.LENGTH_MAX)

    def diversity_score(self, classes) -> int:
        score = self.DIVERSITY_PER_CLASS * len(classes)
        if len(classes) == len(ALL_CLASSES):
            score += self.DIVERSITY_ALL_BONUS
        return score

    def complexity_score(self, sequence: bool, keyboard: bool, repetition: bool) -> int:
        score = self.COMPLEXITY_MAX
        if sequence:
            score -= self.SEQUENCE_PENALTY
        if keyboard:
            score -= self.KEYBOARD_PENALTY
        if repetition:
            score -= self.REPETITION_PENALTY
        return max(score, 0)

    def entropy_score(self, entropy: float) -> int:
        if entropy <= 0:
            return 0
        return self._step(entropy, self.ENTROPY_STEPS, self.ENTROPY_MAX)

    def rating(self, total: int) -> str:
        for upper, rating in self.RATING_BANDS:
            if total <= upper:
                return rating
        return self.RATING_BANDS[-1][1]


##################
# Analyzer       #
##################

class ScoreBreakdown:

    """Result of password analysis."""

    def __init__(self, length_score, diversity_score, complexity_score,
                 entropy_score, total, rating, warnings, suggestions,
                 length, entropy, classes, is_common):
        self.length_score = length_score
        self.diversity_score = diversity_score
        self.complexity_score = complexity_score
        self.entropy_score = entropy_score
        self.total = total
        self.rating = rating
        self.warnings = tuple(warnings)
        self.suggestions = tuple(suggestions)
        self.length = length
        self.entropy = entropy
        self.classes = frozenset(classes)
        self.is_common = is_common

    def __repr__(self):
        return (f"{self.__class__.__name__}(total={self.total}, rating={self.rating!r}, "
                f"length={self.length_score}, diversity={self.diversity_score}, "
                f"complexity={self.complexity_score}, entropy={self.entropy_score})")

    def has_class(self, cls: CharacterClass) -> bool:
        return cls in self.classes


class StrengthAnalyzer:

    def __init__(self, common_passwords: CommonPasswordSet = None,
                 policy: ScoringPolicy = None):
        self._common = common_passwords or CommonPasswordSet()
        self._policy = policy or ScoringPolicy()

    def analyze(self, password: str) -> ScoreBreakdown:
        """Score `password`, collect warnings and suggestions.

        :raises EmptyPassword: for empty string
        """
        if not password:
            log.warning("Empty password passed to analyzer")
            raise EmptyPassword("Password cannot be empty")
        policy = self._policy
        length = len(password)
        classes = classes_present(password)
        is_common = password in self._common
        sequence = has_sequence(password)
        keyboard = has_keyboard_sequence(password)
        repetition = has_repetition(password)
        entropy = estimate_entropy(password)

        length_score = policy.length_score(length)
        diversity_score = policy.diversity_score(classes)
        complexity_score = policy.complexity_score(sequence, keyboard, repetition)
        entropy_score = policy.entropy_score(entropy)
        total = length_score + diversity_score + complexity_score + entropy_score
        if is_common:
            total = min(total, policy.COMMON_PASSWORD_MAX_TOTAL)
        total = max(0, min(total, 100))

        failed = []
        if is_common:
            failed.append('common')
        if length < policy.MIN_LENGTH:
            failed.append('short')
        failed += [cls for cls in ALL_CLASSES if cls not in classes]
        if sequence:
            failed.append('sequence')
        if keyboard:
            failed.append('keyboard')
        if repetition:
            failed.append('repetition')

        result = ScoreBreakdown(
            length_score=length_score,
            diversity_score=diversity_score,
            complexity_score=complexity_score,
            entropy_score=entropy_score,
            total=total,
            rating=policy.rating(total),
            warnings=[FINDINGS[key][0] for key in failed],
            suggestions=[FINDINGS[key][1] for key in failed],
            length=length,
            entropy=entropy,
            classes=classes,
            is_common=is_common,
        )
        log.info("Password analysis completed: rating=%s, score=%d, length=%d, entropy=%.2f",
                 result.rating, result.total, result.length, result.entropy)
        return result


def analyze(password: str, common_passwords: CommonPasswordSet = None) -> ScoreBreakdown:
    """Shortcut for StrengthAnalyzer(common_passwords).analyze(password)."""
    return StrengthAnalyzer(common_passwords).analyze(password)
