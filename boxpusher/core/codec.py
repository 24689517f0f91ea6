"""Conversion between raw level strings and structured levels.

A raw level is one symbol per cell, row-major, ``width * height`` long:

  e = empty floor, w = wall, t = target, h = box on a target,
  b = box off target, p = worker (always standing on empty floor)
"""

from __future__ import annotations

from typing import Iterable, Optional

from boxpusher.core.constants import (
    BOARD_DIMENSIONS,
    BOX,
    BOX_ON_TARGET,
    EMPTY,
    TARGET,
    WORKER,
    Dimensions,
)
from boxpusher.core.objects import Board, Box, Boxes, Position, StructuredLevel, Worker


def encode(
    board: Board,
    boxes: Iterable[Box],
    worker: Optional[Worker] = None,
    dimensions: Dimensions = BOARD_DIMENSIONS,
) -> str:
    """Return the raw level string for the given board, boxes and worker.

    Positions are not validated; the caller guarantees they lie on the board.
    """
    width = dimensions.width
    cells = [EMPTY] * dimensions.cells

    for row_index, row in enumerate(board.grid):
        for column_index, symbol in enumerate(row):
            cells[row_index * width + column_index] = symbol

    for box in boxes:
        index = box.position.y * width + box.position.x
        cells[index] = BOX_ON_TARGET if cells[index] == TARGET else BOX

    if worker is not None:
        cells[worker.position.y * width + worker.position.x] = WORKER

    return "".join(cells)


def decode(raw_level: str, dimensions: Dimensions = BOARD_DIMENSIONS) -> StructuredLevel:
    """Parse a raw level string into board terrain, worker and boxes.

    Symbols past ``width * height`` are ignored. Without a ``p`` the worker
    stands at (0, 0).
    """
    if len(raw_level) < dimensions.cells:
        raise ValueError(
            f"raw level has {len(raw_level)} symbols, expected {dimensions.cells} "
            f"for a {dimensions.width}x{dimensions.height} board"
        )

    board = Board.empty(dimensions)
    worker = Worker(Position(0, 0))
    boxes = Boxes()

    for index, symbol in enumerate(raw_level[: dimensions.cells]):
        row, column = divmod(index, dimensions.width)
        if symbol == WORKER:
            worker = Worker(Position(column, row))
            board.grid[row][column] = EMPTY
        elif symbol == BOX:
            boxes.add(Box(Position(column, row), on_target=False))
            board.grid[row][column] = EMPTY
        elif symbol == BOX_ON_TARGET:
            boxes.add(Box(Position(column, row), on_target=True))
            board.grid[row][column] = TARGET
        else:
            board.grid[row][column] = symbol

    return StructuredLevel(board=board, worker=worker, boxes=boxes)
