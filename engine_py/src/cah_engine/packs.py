"""
Pack catalog loading and candidate list construction.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel, ValidationError

from .config import Settings, default_settings
from .errors import PackLoadError
from .models import Pack, PackCards, PackChoice

logger = logging.getLogger(__name__)

BASE_PACK_STEM = "base"


class CardData(BaseModel):
    """Card with an explicit number of blanks to fill."""
    text: str
    pick: int = 1


class PackData(BaseModel):
    """On-disk pack layout."""
    name: Optional[str] = None
    black: List[Union[str, CardData]] = []
    white: List[Union[str, CardData]] = []
    
    def to_cards(self) -> PackCards:
        return PackCards(
            white=[_card_text(card) for card in self.white],
            black=[_card_text(card) for card in self.black],
        )


def _card_text(card: Union[str, CardData]) -> str:
    return card if isinstance(card, str) else card.text


def load_pack_cards(path: Path) -> PackCards:
    """
    Read the cards of a pack file.
    
    Raises:
        PackLoadError: If the file is missing or malformed
    """
    return _read_pack_data(path).to_cards()


def load_pack(path: Path, name: Optional[str] = None) -> Pack:
    """
    Load a named pack from a JSON file.
    
    Args:
        path: Pack file
        name: Display name; defaults to the file's "name" key, then its stem
    
    Raises:
        PackLoadError: If the file is missing or malformed
    """
    data = _read_pack_data(path)
    return Pack(name=name or data.name or path.stem, cards=data.to_cards())


def _read_pack_data(path: Path) -> PackData:
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        return PackData.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise PackLoadError(f"Could not load pack {path}: {e}") from e


def load_catalog(directory: Path) -> List[Pack]:
    """
    Load every pack in a directory.
    
    Packs are ordered by file name, except that the base pack always comes
    first so it is the one selected by default.
    """
    paths = sorted(Path(directory).glob("*.json"), key=lambda p: (p.stem != BASE_PACK_STEM, p.name))
    catalog = [load_pack(path) for path in paths]
    logger.info(f"Loaded {len(catalog)} packs from {directory}")
    return catalog


def load_optional_pack(path: Optional[Path]) -> Optional[PackCards]:
    """
    Load extension content if it is available.
    
    Returns:
        The pack's cards, or None when the path is unset or unreadable
    """
    if path is None:
        return None
    try:
        return load_pack_cards(path)
    except PackLoadError as e:
        logger.debug(f"Optional pack unavailable: {e.message}")
        return None


def bonus_pack_allowed(
    bonus: Optional[PackCards],
    origin_id: Optional[str],
    settings: Settings = default_settings,
) -> bool:
    """Whether the bonus pack is offered to a lobby opened from origin_id."""
    return (
        bonus is not None
        and settings.bonus_origin_id is not None
        and origin_id == settings.bonus_origin_id
    )


def candidate_packs(
    catalog: Sequence[Pack],
    bonus: Optional[PackCards] = None,
    origin_id: Optional[str] = None,
    settings: Settings = default_settings,
) -> List[PackChoice]:
    """
    Build the list of packs a lobby can choose from.
    
    The first pack starts selected, all others unselected.
    """
    packs = list(catalog)
    if bonus_pack_allowed(bonus, origin_id, settings):
        bonus_pack = Pack(name=settings.bonus_pack_name, cards=bonus)
        packs.append(bonus_pack)
        if settings.duplicate_bonus_pack:
            packs.append(bonus_pack)
    
    return [PackChoice(pack=pack, selected=index == 0) for index, pack in enumerate(packs)]


class PackSelection:
    """Boolean view over the selection flags of a candidate list."""
    
    def __init__(self, choices: List[PackChoice]):
        self.choices = choices
    
    def __len__(self) -> int:
        return len(self.choices)
    
    def __getitem__(self, index: int) -> bool:
        return self.choices[index].selected
    
    def __setitem__(self, index: int, value: bool):
        self.choices[index].selected = bool(value)
    
    def names(self) -> List[str]:
        return [choice.pack.name for choice in self.choices]
    
    def selected_names(self) -> List[str]:
        return [choice.pack.name for choice in self.choices if choice.selected]
