"""Game models and data structures"""

from dataclasses import dataclass, field
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .constants import FLAG_QUIPLASH, FLAG_RANDO


class PackCards(BaseModel):
    """Card text of a single pack."""
    model_config = ConfigDict(frozen=True)

    white: List[str] = Field(default_factory=list)
    black: List[str] = Field(default_factory=list)


class Pack(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    cards: PackCards


@dataclass
class PackChoice:
    pack: Pack
    selected: bool = False


@dataclass
class PlayerState:
    hand: List[str] = field(default_factory=list)  # white cards held
    playing: List[str] = field(default_factory=list)  # cards committed to the round
    points: int = 0
    hidden: bool = False


@dataclass
class CAHState:
    flags: List[bool] = field(default_factory=lambda: [False, False])  # rando, quiplash
    max_points: int = 8
    hand_cards: int = 10
    white_deck: List[str] = field(default_factory=list)
    black_deck: List[str] = field(default_factory=list)
    players: Dict[str, PlayerState] = field(default_factory=dict)

    @property
    def rando(self) -> bool:
        return self.flags[FLAG_RANDO]

    @property
    def quiplash(self) -> bool:
        return self.flags[FLAG_QUIPLASH]
