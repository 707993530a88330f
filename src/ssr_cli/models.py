from typing import List, Optional

from pydantic import BaseModel


class Position(BaseModel):
    row: int
    column: int


class CaptureReport(BaseModel):
    index: int
    name: str
    text: str
    start_byte: int
    end_byte: int
    start: Position
    end: Position


class MatchReport(BaseModel):
    file_path: str
    match_id: int
    pattern_index: int
    captures: List[CaptureReport]


class FileError(BaseModel):
    file_path: str
    message: str
    kind: Optional[str] = None
