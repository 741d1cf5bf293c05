"""
Deterministic shuffling.

Every user sees the same ordering for a given seed and corpus. The
generator is stateless (a function of its integer input) so the result
depends only on the seed and the list length, on any platform.
"""

import math
from typing import List, Sequence, TypeVar

from hackswipe.models.project import ProjectRecord

T = TypeVar("T")

# Seed offset for the projects without a demo video
NO_VIDEO_SEED_OFFSET = 1000


def seeded_random(n: int) -> float:
    """Return frac(sin(n) * 10000), a value in [0, 1)."""
    x = math.sin(n) * 10000
    return x - math.floor(x)


def shuffle_with_seed(items: Sequence[T], seed: int) -> List[T]:
    """
    Return a seeded Fisher-Yates permutation of items.
    
    The input is not modified.
    
    Args:
        items: Sequence to shuffle.
        seed: Integer seed.
        
    Returns:
        New list with the same elements in shuffled order.
    """
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = math.floor(seeded_random(seed + i) * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def build_queue(corpus: Sequence[ProjectRecord], seed: int) -> List[ProjectRecord]:
    """
    Build the swipe queue: projects with a demo video first.
    
    Each partition is shuffled on its own (seed, and seed + 1000 for the
    rest) so adding text-only projects never reorders the video ones.
    
    Args:
        corpus: All project records.
        seed: Integer seed.
        
    Returns:
        Ordered queue.
    """
    with_video = [p for p in corpus if p.has_video]
    without_video = [p for p in corpus if not p.has_video]
    return (
        shuffle_with_seed(with_video, seed)
        + shuffle_with_seed(without_video, seed + NO_VIDEO_SEED_OFFSET)
    )
