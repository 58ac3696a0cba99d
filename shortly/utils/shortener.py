"""Shortcode generation utility

Short codes are derived from the global short URL counter through a salted,
multiplicative permutation over a fixed Base62 space. Sequential counters
therefore map to unique, non-sequential codes.

Example:
    >>> from shortly.utils import generate_shortcode
    >>> generate_shortcode(12345, salt='my_secret')
    'Gh71WPT'
"""

import math
import string

import xxhash

from shortly.constants import Shortcode


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def generate_shortcode(
    counter: int,
    salt: str = Shortcode.SALT,
    length: int = Shortcode.LENGTH,
    mult: int = 1315423911,
) -> str:
    """Generate a short, deterministic URL code from a counter and salt.

    The mapping is bijective for `counter < BASE**length`, deterministic and
    constant-time. The output is obfuscated, not encrypted: it is not trivially
    predictable without the salt and the permutation parameters.

    Args:
        counter (int):
            Unique non-negative integer identifying the URL.
        salt (str, optional):
            Secret string used to shift the output space.
        length (int, optional):
            Length of the resulting code.
        mult (int, optional):
            Multiplicative factor. Must be coprime with BASE**length.

    Raises:
        TypeError:
            If `counter` or `salt` have the wrong type.
        ValueError:
            If `counter` is negative, `salt` is empty, or `mult` is not coprime
            with the modulo space.
    """
    if not isinstance(counter, int):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if counter < 0:
        raise ValueError(f'Counter must be a non-negative integer (given value: {counter}).')
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
    if not salt:
        raise ValueError(f'Salt must be a non-empty string (given value: {salt!r}).')
    if math.gcd(mult, BASE**length) != 1:
        raise ValueError(f'Multiplicative factor must be coprime with mod ({BASE**length}) (given value: mult={mult}).')

    # NOTE: collision-free while `counter < BASE**length`
    modulo_space = BASE**length
    salt_hash = xxhash.xxh64_intdigest(salt.encode('utf-8')) % modulo_space
    permuted = (counter * mult + salt_hash) % modulo_space

    # Base62-encode, most significant digit first
    return ''.join(ALPHABET[(permuted // BASE**i) % BASE] for i in reversed(range(length)))
