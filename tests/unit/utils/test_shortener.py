"""Unit tests for generate_shortcode() in shortener.py.

Test coverage includes:

1. Basic functionality and determinism
   - Returns a fixed-length string; same counter and salt give the same code.

2. Salt variation
   - Changing the salt for the same counter produces different codes.

3. Edge cases
   - Small, zero and very large counters; wrap-around past the modulo space.
   - Sequential counters map to distinct codes.

4. Error handling
   - Invalid counters, salts and multiplicative factors raise.

5. Output format and length
   - Only Base62 characters; the 'length' argument is respected.
"""

import string

import pytest

from shortly.constants import Shortcode
from shortly.utils import generate_shortcode


# -------------------------------
# 1. Basic functionality and determinism
# -------------------------------


def test_generate_shortcode_returns_fixed_length_string():
    result = generate_shortcode(123, salt='unit_test_salt', length=7)
    assert isinstance(result, str)
    assert len(result) == 7
    assert result == 'XrJQsJI'


def test_generate_shortcode_is_deterministic():
    assert generate_shortcode(123, salt='unit_test_salt') == generate_shortcode(123, salt='unit_test_salt')


def test_generate_shortcode_default_length():
    assert len(generate_shortcode(42)) == Shortcode.LENGTH


# -------------------------------
# 2. Salt variation
# -------------------------------


def test_different_salts_produce_different_codes():
    result1 = generate_shortcode(123, salt='unit_test_saltA')
    result2 = generate_shortcode(123, salt='unit_test_saltB')
    assert result1 != result2
    assert result1 == 'Nr5bkci'
    assert result2 == 'q7femOj'


def test_non_ascii_salt_is_accepted():
    result1 = generate_shortcode(123, salt='sel_ünïcödé')
    result2 = generate_shortcode(123, salt='sel_ünïcödé')
    assert result1 == result2
    assert len(result1) == 7
    assert result1 != generate_shortcode(123, salt='sel_unicode')


# -------------------------------
# 3. Edge cases
# -------------------------------


@pytest.mark.parametrize('counter', [0, 1, 10**6, 2**63 - 1])
def test_edge_counters_produce_fixed_length_codes(counter):
    assert len(generate_shortcode(counter, salt='edge_test')) == 7


def test_large_counters_wrap_around():
    result1 = generate_shortcode(12345, salt='my_secret', length=7)
    result2 = generate_shortcode(62**7 + 12345, salt='my_secret', length=7)
    assert result1 == result2 == 'Gh71WPT'


def test_sequential_counters_produce_distinct_codes():
    codes = {generate_shortcode(counter, salt='unique_test') for counter in range(10_000)}
    assert len(codes) == 10_000


# -------------------------------
# 4. Error handling
# -------------------------------


@pytest.mark.parametrize('counter', [None, 'abc', 12.34])
def test_invalid_counter_type_raises_error(counter):
    with pytest.raises(TypeError):
        generate_shortcode(counter, salt='unit_test_salt')


def test_negative_counter_raises_error():
    with pytest.raises(ValueError, match='non-negative'):
        generate_shortcode(-1, salt='unit_test_salt')


@pytest.mark.parametrize('salt', [None, 1, 12.34])
def test_invalid_salt_type_raises_error(salt):
    with pytest.raises(TypeError):
        generate_shortcode(100, salt=salt)


def test_empty_salt_raises_error():
    with pytest.raises(ValueError, match='non-empty'):
        generate_shortcode(100, salt='')


def test_non_coprime_multiplier_raises_error():
    with pytest.raises(ValueError, match='coprime'):
        generate_shortcode(100, salt='unit_test_salt', mult=62)


# -------------------------------
# 5. Output format and length
# -------------------------------


def test_generate_shortcode_is_base62_safe():
    alphabet = set(string.ascii_letters + string.digits)
    result = generate_shortcode(123, salt='format_test')
    assert set(result) <= alphabet


def test_generate_shortcode_respects_length():
    assert len(generate_shortcode(12345, salt='length_test', length=10)) == 10
