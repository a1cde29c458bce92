"""
Deck assembly and shuffling utilities.
"""

import random
from collections import Counter
from typing import List, Optional, Sequence, Tuple

from .models import CAHState, PackChoice


def assemble_decks(choices: Sequence[PackChoice]) -> Tuple[List[str], List[str]]:
    """
    Concatenate the cards of every selected pack.
    
    Args:
        choices: Candidate packs with their selection flags
    
    Returns:
        Tuple of (white deck, black deck) in pack order, unshuffled
    """
    white_deck: List[str] = []
    black_deck: List[str] = []
    
    for choice in choices:
        if choice.selected:
            white_deck.extend(choice.pack.cards.white)
            black_deck.extend(choice.pack.cards.black)
    
    return white_deck, black_deck


def shuffle_deck(
    deck: List[str],
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> None:
    """
    Shuffle a deck in place.
    
    Args:
        deck: List of cards to shuffle
        seed: Optional seed for deterministic shuffling
        rng: Optional random source, takes precedence over seed
    """
    if rng is None:
        rng = random.Random(seed) if seed is not None else random
    rng.shuffle(deck)


def validate_deck_integrity(state: CAHState, choices: Sequence[PackChoice]) -> bool:
    """
    Check that the decks hold exactly the cards of the selected packs.
    
    Args:
        state: State after the start transition
        choices: Candidate packs the decks were built from
    
    Returns:
        True if both decks are permutations of the selected cards
    """
    expected_white, expected_black = assemble_decks(choices)
    return (
        Counter(state.white_deck) == Counter(expected_white)
        and Counter(state.black_deck) == Counter(expected_black)
    )
