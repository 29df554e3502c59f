# CharacterClass
# (character classes and their alphabets)
#

import enum
import string

LOWER_ALPHABET = string.ascii_lowercase
UPPER_ALPHABET = string.ascii_uppercase
DIGIT_ALPHABET = string.digits
SPECIAL_ALPHABET = '!@#$%^&*()-_=+'


class CharacterClass(enum.Enum):

    LOWER = 'L'
    UPPER = 'U'
    DIGIT = 'D'
    SPECIAL = 'S'

    @property
    def alphabet(self) -> str:
        return ALPHABETS[self]

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_pattern_char(cls, ch: str):
        """Map pattern letter (U, L, D, S) to its class.

        :raises ValueError: for any other character
        """
        return cls(ch)


ALPHABETS = {
    CharacterClass.LOWER: LOWER_ALPHABET,
    CharacterClass.UPPER: UPPER_ALPHABET,
    CharacterClass.DIGIT: DIGIT_ALPHABET,
    CharacterClass.SPECIAL: SPECIAL_ALPHABET,
}

#: All classes, in the order used for mandatory draws and findings
ALL_CLASSES = (CharacterClass.LOWER, CharacterClass.UPPER,
               CharacterClass.DIGIT, CharacterClass.SPECIAL)

UNION_ALPHABET = ''.join(ALPHABETS[cls] for cls in ALL_CLASSES)


def classify(ch: str):
    """Return CharacterClass of `ch`.

    Unlike the generator alphabets, this accepts any character:
    letters are classified by case, anything that is neither
    a letter nor a digit counts as special.

    """
    if ch.islower():
        return CharacterClass.LOWER
    if ch.isupper():
        return CharacterClass.UPPER
    if ch.isdigit():
        return CharacterClass.DIGIT
    if ch.isalpha():
        # caseless letters (e.g. CJK) are closest to lowercase
        return CharacterClass.LOWER
    return CharacterClass.SPECIAL


def classes_present(text: str) -> frozenset:
    """Set of character classes occurring in `text`."""
    return frozenset(classify(ch) for ch in text)


def has_all_classes(text: str) -> bool:
    return len(classes_present(text)) == len(ALL_CLASSES)
