"""
Reaction toggling - pure set semantics over (user, emoji) pairs.
"""

from typing import Iterable

from pairchat.domain.value_objects.reaction import Reaction


def unique_reactions(reactions: Iterable[Reaction]) -> list[Reaction]:
    """Drop repeated pairs, keeping first-seen order."""
    seen: set[Reaction] = set()
    result = []
    for reaction in reactions:
        if reaction not in seen:
            seen.add(reaction)
            result.append(reaction)
    return result


def toggle_reaction(
    reactions: Iterable[Reaction], reaction: Reaction
) -> tuple[list[Reaction], bool]:
    """
    Remove `reaction` if present, append it otherwise.

    Returns:
        (new reaction list, True if the pair was added)
    """
    current = unique_reactions(reactions)
    if reaction in current:
        return [r for r in current if r != reaction], False
    return current + [reaction], True
