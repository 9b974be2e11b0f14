"""Offline generator for the Great Labyrinth room graph linking the five cities."""

from .generator import DEFAULT_SEED, DEFAULT_SIZE, GenerationSummary, LabyrinthGenerator
from .grid import Direction, GateInfo, Grid
from .loader import Labyrinth, LabyrinthLoadError, load_labyrinth
from .serialization import DOCUMENT_FILENAME, Room, dump_document, room_id, write_document

__all__ = [
    "DEFAULT_SEED",
    "DEFAULT_SIZE",
    "DOCUMENT_FILENAME",
    "Direction",
    "GateInfo",
    "GenerationSummary",
    "Grid",
    "Labyrinth",
    "LabyrinthGenerator",
    "LabyrinthLoadError",
    "Room",
    "dump_document",
    "load_labyrinth",
    "room_id",
    "write_document",
]
