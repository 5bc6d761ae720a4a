"""
Tie-break source used when several teams or pairs are equally eligible.
"""
import random
from typing import Dict, List, Optional, Union


def normalize_seed(seed):
    """
    Turn an integer-looking string into an int.

    Seeds typed on the command line arrive as strings while settings.yaml and
    JSON give ints, and random.Random("5") shuffles differently from
    random.Random(5).
    """
    if isinstance(seed, str):
        text = seed.strip()
        digits = text[1:] if text.startswith('-') else text
        if digits.isdigit():
            return int(text)
        return text
    return seed


class TieBreak:
    """
    Produces a ranking of the teams for each round.

    With a seed, every call to order() returns the next seeded shuffle, so a
    whole schedule is reproducible from the seed. Without a seed the input
    order is returned unchanged.
    """

    def __init__(self, seed: Optional[Union[int, str]] = None):
        seed = normalize_seed(seed)
        self.seed = seed
        self._rng = random.Random(seed) if seed is not None else None

    def order(self, teams: List[str]) -> List[str]:
        ordered = list(teams)
        if self._rng is not None:
            self._rng.shuffle(ordered)
        return ordered

    def ranks(self, teams: List[str]) -> Dict[str, int]:
        """Team -> position in this round's order (lower is preferred)."""
        return {team: index for index, team in enumerate(self.order(teams))}

    def __repr__(self):
        return f"TieBreak(seed={self.seed})"


def as_tie_break(value) -> TieBreak:
    """Accept a TieBreak, a seed (int or integer string) or None."""
    if isinstance(value, TieBreak):
        return value
    return TieBreak(value)
