"""Value types shared with the game session: worker, boxes and board."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

from boxpusher.core.constants import BOARD_DIMENSIONS, EMPTY, Dimensions


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> Position:
        return cls(x=int(payload["x"]), y=int(payload["y"]))


@dataclass
class Worker:
    position: Position

    def to_dict(self) -> Dict[str, Any]:
        return {"position": self.position.to_dict()}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> Worker:
        return cls(position=Position.from_dict(payload["position"]))


@dataclass
class Box:
    position: Position
    on_target: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"position": self.position.to_dict(), "onTarget": self.on_target}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> Box:
        return cls(
            position=Position.from_dict(payload["position"]),
            on_target=bool(payload.get("onTarget", False)),
        )


@dataclass
class Boxes:
    """Ordered collection of boxes on the board."""

    boxes: List[Box] = field(default_factory=list)

    def __iter__(self) -> Iterator[Box]:
        return iter(self.boxes)

    def __len__(self) -> int:
        return len(self.boxes)

    def add(self, box: Box) -> None:
        self.boxes.append(box)

    def on_target_count(self) -> int:
        return sum(1 for box in self.boxes if box.on_target)

    def to_dict(self) -> Dict[str, Any]:
        return {"boxes": [box.to_dict() for box in self.boxes]}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> Boxes:
        return cls(boxes=[Box.from_dict(item) for item in payload.get("boxes", [])])


@dataclass
class Board:
    """Terrain grid indexed as ``grid[row][column]``; holds only e, w and t."""

    grid: List[List[str]]

    @classmethod
    def empty(cls, dimensions: Dimensions = BOARD_DIMENSIONS) -> Board:
        return cls(grid=[[EMPTY] * dimensions.width for _ in range(dimensions.height)])

    def at(self, position: Position) -> str:
        return self.grid[position.y][position.x]


@dataclass
class StructuredLevel:
    """A decoded level ready to hand to a game session."""

    board: Board
    worker: Worker
    boxes: Boxes

    def is_solved(self) -> bool:
        """True when there is at least one box and every box sits on a target."""
        return len(self.boxes) > 0 and self.boxes.on_target_count() == len(self.boxes)
