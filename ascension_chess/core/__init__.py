from .types import Color, Pos, FILES, pos_name, parse_pos, all_squares
from .definitions import PieceKind, BASE_KINDS, ASCENDED_KINDS, STANDARD_PROMOTIONS, UNLOCKED_PROMOTIONS
from .piece import Piece
from .board import Board
from .moves import MoveRecord
from .events import Listener, MoveMade, PieceAscended, PromotionResolved, TurnStarted, GameEnded
from .result import GameResult, ResultReason
from .game import Game, Phase, Normal, PostUpgrade, Promoting, GameOver
from .tracker import PositionTracker
from .setup import setup_standard, ascii_board

__all__ = [
    "Color","Pos","FILES","pos_name","parse_pos","all_squares",
    "PieceKind","BASE_KINDS","ASCENDED_KINDS","STANDARD_PROMOTIONS","UNLOCKED_PROMOTIONS",
    "Piece","Board","MoveRecord",
    "Listener","MoveMade","PieceAscended","PromotionResolved","TurnStarted","GameEnded",
    "GameResult","ResultReason",
    "Game","Phase","Normal","PostUpgrade","Promoting","GameOver",
    "PositionTracker",
    "setup_standard","ascii_board",
]
