"""Game constants"""

GAME_NAME = "Cards Against Humanity"
GAME_COLOR = 0x000000

MIN_PLAYERS = 2
MAX_PLAYERS = 20

# Number.MAX_SAFE_INTEGER
MAX_SAFE_INTEGER = 2 ** 53 - 1

MIN_POINTS = 1
DEFAULT_POINTS = 8
MAX_POINTS = MAX_SAFE_INTEGER

MIN_HAND_CARDS = 5
DEFAULT_HAND_CARDS = 10
MAX_HAND_CARDS = 20

RANDO_ID = "rando"
RANDO_NAME = "Rando Cardrissian"
QUIPLASH_NAME = "Quiplash Mode"

FLAG_RANDO = 0
FLAG_QUIPLASH = 1
RULE_NAMES = [RANDO_NAME, QUIPLASH_NAME]

# Component ids
JOIN_BUTTON = "join"
LEAVE_BUTTON = "leave"
START_BUTTON = "start"

# Session phases
PHASE_LOBBY = "lobby"
PHASE_PLAY = "play"

NO_BLACK_CARDS_MESSAGE = "There are no black cards in the selected packs."
NOT_ENOUGH_WHITE_CARDS_MESSAGE = (
    "There aren't enough white cards in the selected packs to give everyone a full hand."
)
