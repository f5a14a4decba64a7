import re
from typing import List, Optional, Sequence

from utils.lexicon import NUMBER_WORDS, STRUCTURAL_WORDS, FILLER_WORDS

# ASCII digits only, int() rejects "²" and "①"
DIGITS = re.compile(r"\d+", re.ASCII)


def word_to_number(token: str) -> Optional[int]:
    """
    Convert a digit string, number word, compound ("twenty-three", "forty one")
    or ordinal ("first", "1st") into an int. Returns None when the token is not numeric.
    """
    lower = token.lower().strip()
    if not lower:
        return None

    if DIGITS.fullmatch(lower):
        return int(lower)

    if lower in NUMBER_WORDS:
        return NUMBER_WORDS[lower]

    parts = [p for p in re.split(r"[\s-]+", lower) if p]
    if len(parts) == 2:
        tens = NUMBER_WORDS.get(parts[0])
        ones = NUMBER_WORDS.get(parts[1])
        if tens is not None and ones is not None and tens >= 20 and tens % 10 == 0 and tens < 100 and 1 <= ones <= 9:
            return tens + ones

    return None


def _is_tens_word(token: str) -> bool:
    value = NUMBER_WORDS.get(token.lower())
    return value is not None and 20 <= value < 100 and value % 10 == 0


def _is_unit_word(token: str) -> bool:
    value = NUMBER_WORDS.get(token.lower())
    return value is not None and 1 <= value <= 9


def _add_hundreds_remainder(tokens: Sequence[str], i: int, value: int):
    # picks up "[and] nineteen" / "[and] twenty three" after a hundred
    n = len(tokens)
    if i < n and tokens[i].lower() == "and":
        i += 1
    if i < n and not DIGITS.fullmatch(tokens[i]):
        rest = word_to_number(tokens[i])
        if rest is not None and 1 <= rest <= 99:
            i += 1
            if _is_tens_word(tokens[i - 1]) and i < n and _is_unit_word(tokens[i]):
                rest += NUMBER_WORDS[tokens[i].lower()]
                i += 1
            value += rest
    return i, value


def collect_numbers(tokens: Sequence[str]) -> List[int]:
    """
    Resolve every number in a token sequence, in order.

    Adjacent spoken parts are joined first, so "twenty eight" is 28 and
    "one hundred nineteen" is 119. Structural and filler words are skipped but
    still break adjacency: "twenty verse three" stays 20 and 3.
    """
    numbers: List[int] = []
    i = 0
    n = len(tokens)

    while i < n:
        token = tokens[i].lower()
        if token in STRUCTURAL_WORDS or token in FILLER_WORDS:
            i += 1
            continue

        value = word_to_number(token)
        if value is None:
            i += 1
            continue
        i += 1

        # "one hundred ..." / "hundred ..."
        if 1 <= value <= 9 and i < n and tokens[i].lower() == "hundred":
            value *= 100
            i += 1
            i, value = _add_hundreds_remainder(tokens, i, value)
        elif token == "hundred":
            i, value = _add_hundreds_remainder(tokens, i, value)
        elif _is_tens_word(token) and i < n and _is_unit_word(tokens[i]):
            value += NUMBER_WORDS[tokens[i].lower()]
            i += 1

        numbers.append(value)

    return numbers
