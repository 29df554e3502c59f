from collections import Counter

import pytest

from kdguard.rng import SecureRandomSource
from kdguard.errors import RandomSourceError

from .helpers import scripted_source, ScriptedBytes


def test_randbelow_rejects_out_of_range():
    # 5 bits are used for n=26: 31 and 27 are out of range and skipped
    rnd = scripted_source([31, 27, 5])
    assert rnd.randbelow(26) == 5


def test_randbelow_masks_high_bits():
    rnd = scripted_source([0b11100011])
    assert rnd.randbelow(8) == 3


def test_randbelow_multibyte():
    randombytes = ScriptedBytes([0x1e, 0x5f])
    rnd = SecureRandomSource(randombytes)
    assert rnd.randbelow(7776) == 0x1e5f
    assert randombytes.consumed == 2


def test_randbelow_trivial():
    randombytes = ScriptedBytes()
    rnd = SecureRandomSource(randombytes)
    assert rnd.randbelow(1) == 0
    assert randombytes.consumed == 0
    with pytest.raises(ValueError):
        rnd.randbelow(0)


def test_randbelow_distribution():
    rnd = SecureRandomSource()
    counts = Counter(rnd.randbelow(76) for _ in range(20_000))
    assert set(counts) == set(range(76))
    # expected 263 per value
    assert all(150 < n < 400 for n in counts.values())


def test_shuffle_is_permutation():
    rnd = SecureRandomSource()
    items = list(range(50))
    rnd.shuffle(items)
    assert sorted(items) == list(range(50))


def test_choice():
    rnd = scripted_source([2])
    assert rnd.choice("abcd") == 'c'


def test_short_read_is_fatal():
    rnd = SecureRandomSource(randombytes=lambda size: b'')
    with pytest.raises(RandomSourceError):
        rnd.randbelow(10)


def test_failing_source_is_fatal():
    def broken(_size):
        raise OSError("no entropy")
    rnd = SecureRandomSource(randombytes=broken)
    with pytest.raises(RandomSourceError, match="no entropy"):
        rnd.randbytes(4)
