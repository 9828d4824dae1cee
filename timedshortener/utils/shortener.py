"""Short code generation utility

Generated codes are meant to be typed in by hand: one uppercase letter
followed by a five digit number, optionally joined by a separator.

Functions:
    generate_code(rng=None, separator='') -> str
        Draw a random code such as 'K48213' (or 'K:48213').

Example:
    >>> from timedshortener.utils import generate_code
    >>> code = generate_code(separator=':')
    >>> code[0].isupper(), code[1], len(code)
    (True, ':', 7)
"""

import random
import string


LETTERS = string.ascii_uppercase
MIN_NUMBER = 10_000
MAX_NUMBER = 99_999
CODE_SPACE = len(LETTERS) * (MAX_NUMBER - MIN_NUMBER + 1)  # 26 * 90,000 = 2,340,000

_RNG = random.Random()  # noqa: S311


def generate_code(rng: random.Random | None = None, separator: str = '') -> str:
    """Generate a random human-typeable short code.

    Args:
        rng (random.Random, optional):
            Source of randomness. Defaults to the module-level generator.
            Pass a seeded instance for reproducible codes.

        separator (str, optional):
            String placed between the letter and the digits. Defaults to ''.

    Returns:
        str: e.g. 'Q10493' or 'Q:10493'.

    NOTE:
        - Codes are not secret: they only have to be unlikely to collide among
          the handful of entries alive within one TTL window.
        - Uniqueness is checked against the store by the caller, not here.
    """
    if not isinstance(separator, str):
        raise TypeError(f'Separator must be of type string (given type: {type(separator)}).')

    rng = rng or _RNG
    letter = rng.choice(LETTERS)
    number = rng.randint(MIN_NUMBER, MAX_NUMBER)
    return f'{letter}{separator}{number}'
