"""
Unbiased catalog shuffle.
"""

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


def fisher_yates(items: Sequence[T], rng: Optional[random.Random] = None) -> list[T]:
    """
    Return a shuffled copy of items using the Fisher-Yates algorithm.

    Walks from the last index down to 1, swapping each element with a
    uniformly chosen element in [0, i]. Every permutation is equally
    likely given a uniform generator. The input is left untouched.

    Args:
        items: Sequence to shuffle
        rng: Random generator (defaults to the module-level generator)

    Returns:
        A new list holding the same elements in shuffled order
    """
    randbelow = (rng or random).randrange
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = randbelow(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
