import random
from typing import List, Sequence


def shuffle_players(player_ids: Sequence[str]) -> List[str]:
    """Return a shuffled copy of ``player_ids`` (Fisher-Yates).

    The swap index is drawn from ``[0, i]`` inclusive. Drawing from ``[0, i)``
    would only ever produce cyclic permutations, so with two players the host
    could never go first.
    """
    order = list(player_ids)
    for i in range(len(order) - 1, 0, -1):
        j = random.randint(0, i)
        order[i], order[j] = order[j], order[i]
    return order
