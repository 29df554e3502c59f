import math

import pytest

from kdguard import health
from kdguard.health import (StrengthAnalyzer, ScoringPolicy, has_sequence,
                            has_keyboard_sequence, has_repetition, estimate_entropy)
from kdguard.charset import CharacterClass
from kdguard.wordlist import CommonPasswordSet
from kdguard.errors import EmptyPassword

STRONG_PASSWORD = "Tq9#mK2$pLz7!xR4vC8&"


@pytest.fixture()
def analyzer():
    return StrengthAnalyzer(CommonPasswordSet(["password", "123456", "qwerty", "letmein"]))


def test_common_password(analyzer):
    result = analyzer.analyze("password")
    assert result.rating == health.WEAK
    assert result.is_common
    assert result.warnings[0] == "Matches a common password"
    assert result.total <= ScoringPolicy.COMMON_PASSWORD_MAX_TOTAL


def test_common_password_ignores_case(analyzer):
    result = analyzer.analyze("LetMeIn")
    assert result.is_common
    assert result.rating == health.WEAK


def test_same_password_not_in_list():
    result = StrengthAnalyzer().analyze("password")
    assert not result.is_common
    assert result.total == 50
    assert result.rating == health.MEDIUM


def test_very_strong(analyzer):
    result = analyzer.analyze(STRONG_PASSWORD)
    assert result.rating == health.VERY_STRONG
    assert result.length_score == 25
    assert result.diversity_score == 30
    assert result.complexity_score == 25
    assert result.entropy_score == 20
    assert result.total == 100
    assert result.warnings == ()
    assert result.suggestions == ()


def test_empty_password(analyzer):
    with pytest.raises(EmptyPassword):
        analyzer.analyze("")


def test_findings_order():
    result = StrengthAnalyzer().analyze("abc")
    assert result.warnings == (
        "Password is too short",
        "No uppercase letters",
        "No digits",
        "No special characters",
        "Contains a sequential run (e.g. abc, 321)",
    )
    assert len(result.suggestions) == len(result.warnings)
    assert result.suggestions[0].startswith("Use at least 8 characters")


def test_sub_scores():
    result = StrengthAnalyzer().analyze("Test123!")
    assert result.length == 8
    assert result.length_score == 10
    assert result.diversity_score == 30
    # "123" is a sequence and a keyboard run
    assert result.complexity_score == 5
    assert all(result.has_class(cls) for cls in CharacterClass)


def test_complexity_floor():
    result = StrengthAnalyzer().analyze("123123qwe")
    assert result.complexity_score == 0
    assert "Contains repeated characters or substrings" in result.warnings


@pytest.mark.parametrize('text, expected', [
    ("abc", True),
    ("xCBAx", True),
    ("pass789", True),
    ("9876", True),
    ("ab", False),
    ("a1b2c3", False),
    ("9ab", False),
    ("acegik", False),
])
def test_has_sequence(text, expected):
    assert has_sequence(text) == expected


@pytest.mark.parametrize('text, expected', [
    ("qwe", True),
    ("xxPOIxx", True),
    ("lkj", True),
    ("asdf", True),
    ("yxc", True),
    ("qaz", False),
    ("qw", False),
])
def test_has_keyboard_sequence(text, expected):
    assert has_keyboard_sequence(text) == expected


@pytest.mark.parametrize('text, expected', [
    ("aaa", True),
    ("x111y", True),
    ("abab", True),
    ("pass123123", True),
    ("aa", False),
    ("abc123", False),
    ("abcab", False),
    ("Password1Password1", True),
])
def test_has_repetition(text, expected):
    assert has_repetition(text) == expected


def test_repetition_size_limit():
    block = "abcdefghijklmnopqrst"  # 20 distinct characters
    assert not has_repetition(block + block)
    assert has_repetition(block + block, max_size=20)


def test_long_password():
    # distinct characters, none of the checks returns early
    password = "".join(chr(0x4e00 + i) for i in range(20000))
    result = StrengthAnalyzer().analyze(password)
    assert result.length == 20000
    assert result.complexity_score == 25


def test_entropy():
    assert estimate_entropy("abc") == pytest.approx(3 * math.log2(26))
    assert estimate_entropy("aB3!") == pytest.approx(4 * math.log2(76))


@pytest.mark.parametrize('length, score', [
    (1, 0), (7, 0), (8, 10), (12, 10), (13, 20), (16, 20), (17, 25), (64, 25),
])
def test_length_score(length, score):
    assert ScoringPolicy().length_score(length) == score


@pytest.mark.parametrize('entropy, score', [
    (0.0, 0), (10.0, 5), (29.9, 5), (30.0, 10), (45.0, 15), (50.0, 20), (200.0, 20),
])
def test_entropy_score(entropy, score):
    assert ScoringPolicy().entropy_score(entropy) == score


def test_diversity_score():
    policy = ScoringPolicy()
    assert policy.diversity_score({CharacterClass.LOWER}) == 5
    assert policy.diversity_score(set(CharacterClass)) == 30


@pytest.mark.parametrize('total, rating', [
    (0, health.WEAK), (40, health.WEAK),
    (41, health.MEDIUM), (60, health.MEDIUM),
    (61, health.STRONG), (80, health.STRONG),
    (81, health.VERY_STRONG), (100, health.VERY_STRONG),
])
def test_rating_bands(total, rating):
    assert ScoringPolicy().rating(total) == rating


def test_custom_policy():
    class StrictPolicy(ScoringPolicy):
        LENGTH_STEPS = ((12, 0), (24, 10), (32, 20))

    result = StrengthAnalyzer(policy=StrictPolicy()).analyze(STRONG_PASSWORD)
    assert result.length_score == 10
    assert result.total == 85


def test_analyze_shortcut():
    result = health.analyze("PASSWORD", CommonPasswordSet(["password"]))
    assert result.is_common
