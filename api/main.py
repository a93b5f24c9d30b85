"""FastAPI adapter exposing the Matroska rules engine.

The service is stateless: every request carries the full game state and
every response returns one. Sessions and history live with the client.
"""

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from matroska import (
    Board,
    GameResult,
    GameState,
    MatroskaError,
    MoveAction,
    Piece,
    Player,
    Position,
    Size,
    action_to_notation,
    evaluate,
    new_game,
    result_of,
)
from matroska.types import BOARD_SIZE, RESERVE_CAPACITY

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Vite dev server
ALLOWED_ORIGINS = ["http://localhost:5173"]

app = FastAPI(title="Matroska API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Pydantic models for API ---


class PlayerModel(BaseModel):
    player_id: str
    is_human: bool = False


class PieceModel(BaseModel):
    owner: str  # player_id
    size: int = Field(ge=Size.SMALL.value, le=Size.LARGE.value)  # 0=small, 1=medium, 2=large


class CellModel(BaseModel):
    stack: list[PieceModel]  # Bottom to top


class ReservesModel(BaseModel):
    small: int = Field(default=0, ge=0, le=RESERVE_CAPACITY)
    medium: int = Field(default=0, ge=0, le=RESERVE_CAPACITY)
    large: int = Field(default=0, ge=0, le=RESERVE_CAPACITY)


class GameStateModel(BaseModel):
    max_player: PlayerModel
    min_player: PlayerModel
    player_on_turn: str  # player_id
    board: list[list[CellModel]]  # board[y][x]
    reserves: dict[str, ReservesModel]  # keyed by player_id
    result: str = GameResult.ONGOING.value


class ActionModel(BaseModel):
    player: str  # player_id
    size: int = Field(ge=Size.SMALL.value, le=Size.LARGE.value)
    to_pos: tuple[int, int]  # (x, y)
    from_pos: tuple[int, int] | None = None  # None means from reserve
    notation: str | None = None


class ApplyRequest(BaseModel):
    state: GameStateModel
    action: ActionModel


class EvaluationModel(BaseModel):
    terminal: bool
    winner: str | None  # player_id
    score: int | None  # Heuristic value, None once the game is decided


# --- Helper functions ---


def state_to_model(state: GameState) -> GameStateModel:
    """Convert GameState to API model."""
    board = state.board
    rows: list[list[CellModel]] = []
    for y in range(BOARD_SIZE):
        row: list[CellModel] = []
        for x in range(BOARD_SIZE):
            stack = board.stack_at(Position(x, y))
            row.append(
                CellModel(stack=[PieceModel(owner=p.owner.player_id, size=int(p.size)) for p in stack])
            )
        rows.append(row)

    reserves = {}
    for player in (state.max_player, state.min_player):
        reserves[player.player_id] = ReservesModel(
            small=board.reserve_count(player, Size.SMALL),
            medium=board.reserve_count(player, Size.MEDIUM),
            large=board.reserve_count(player, Size.LARGE),
        )

    return GameStateModel(
        max_player=PlayerModel(
            player_id=state.max_player.player_id, is_human=state.max_player.is_human
        ),
        min_player=PlayerModel(
            player_id=state.min_player.player_id, is_human=state.min_player.is_human
        ),
        player_on_turn=state.player_on_turn.player_id,
        board=rows,
        reserves=reserves,
        result=result_of(state).value,
    )


def model_to_state(model: GameStateModel) -> GameState:
    """
    Rebuild a GameState from its API model.

    Pieces go through Board.add_piece, so a model that breaks a board
    rule raises RuleViolation.
    """
    max_player = Player(model.max_player.player_id, model.max_player.is_human, True)
    min_player = Player(model.min_player.player_id, model.min_player.is_human, False)
    players = {max_player.player_id: max_player, min_player.player_id: min_player}

    if len(model.board) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in model.board):
        raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}")

    board = Board()
    for y, row in enumerate(model.board):
        for x, cell in enumerate(row):
            for piece in cell.stack:
                board.add_piece(Piece(_lookup(players, piece.owner), piece.size, Position(x, y)))

    for player_id, counts in model.reserves.items():
        player = _lookup(players, player_id)
        for size, count in (
            (Size.SMALL, counts.small),
            (Size.MEDIUM, counts.medium),
            (Size.LARGE, counts.large),
        ):
            for _ in range(count):
                board.add_piece(Piece(player, size))

    return GameState(board, max_player, min_player, _lookup(players, model.player_on_turn))


def model_to_action(model: ActionModel, state: GameState) -> MoveAction:
    """Convert an API action to a MoveAction against the given state."""
    player = _lookup({p.player_id: p for p in (state.max_player, state.min_player)}, model.player)
    origin = Position(*model.from_pos) if model.from_pos is not None else None
    return MoveAction(
        player=player,
        source=Piece(player, model.size, origin),
        destination=Position(*model.to_pos),
    )


def action_to_model(action: MoveAction) -> ActionModel:
    """Convert MoveAction to API model."""
    return ActionModel(
        player=action.player.player_id,
        size=int(action.source.size),
        to_pos=tuple(action.destination),
        from_pos=tuple(action.source.position) if action.source.position is not None else None,
        notation=action_to_notation(action),
    )


def _lookup(players: dict[str, Player], player_id: str) -> Player:
    try:
        return players[player_id]
    except KeyError:
        raise ValueError(f"Unknown player: {player_id}") from None


def _load_state(model: GameStateModel) -> GameState:
    try:
        return model_to_state(model)
    except (MatroskaError, ValueError) as e:
        logger.warning("Rejected game state: %s", e)
        raise HTTPException(status_code=400, detail=f"Invalid game state: {e}")


# --- API endpoints ---


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/new", response_model=GameStateModel)
def get_new_game():
    """Get the starting position of a new game."""
    return state_to_model(new_game())


@app.post("/actions", response_model=list[ActionModel])
def get_actions(data: GameStateModel):
    """Get all actions available to the player on turn."""
    state = _load_state(data)
    return [action_to_model(a) for a in state.get_possible_actions()]


@app.post("/apply", response_model=GameStateModel)
def apply_action(data: ApplyRequest):
    """Apply an action and return the resulting state."""
    state = _load_state(data.state)

    if state.is_terminal():
        raise HTTPException(status_code=400, detail="Game is already over")

    try:
        action = model_to_action(data.action, state)
        new_state = action.apply(state)
    except (MatroskaError, ValueError) as e:
        logger.warning("Rejected action %s: %s", data.action, e)
        raise HTTPException(status_code=400, detail=f"Illegal action: {e}")

    return state_to_model(new_state)


@app.post("/evaluate", response_model=EvaluationModel)
def evaluate_state(data: GameStateModel):
    """Report terminality, winner and heuristic score of a state."""
    state = _load_state(data)
    winner = state.get_winner()
    return EvaluationModel(
        terminal=winner is not None,
        winner=winner.player_id if winner is not None else None,
        score=evaluate(state.board) if winner is None else None,
    )
