from pathlib import Path

from ssr_tree_sitter.models import Capture, Match

from .models import CaptureReport, FileError, MatchReport, Position


def capture_to_report(capture: Capture) -> CaptureReport:
    """Convert an internal capture dataclass to an external Pydantic report"""
    return CaptureReport(
        index=capture.index,
        name=capture.name,
        text=capture.text,
        start_byte=capture.range.start_byte,
        end_byte=capture.range.end_byte,
        start=Position(row=capture.range.start_point.row, column=capture.range.start_point.column),
        end=Position(row=capture.range.end_point.row, column=capture.range.end_point.column),
    )


def match_to_report(file_path: Path, match: Match) -> MatchReport:
    return MatchReport(
        file_path=str(file_path),
        match_id=match.id,
        pattern_index=match.pattern_index,
        captures=[capture_to_report(c) for c in match.captures],
    )


def error_to_report(file_path: Path, error: Exception) -> FileError:
    return FileError(file_path=str(file_path), message=str(error), kind=type(error).__name__)
