"""
io_utils.py - File I/O utilities for the tree packer
Export format: header id,x,y,deg; integer id, rounded integer x and y,
rotation in degrees
"""
import os
from typing import List, Optional, Sequence, Tuple

from .geometry import PlacedShape
from .strategies import round_half_up

CSV_HEADER = "id,x,y,deg"


def get_output_path(filename: str, directory: Optional[str] = None) -> str:
    """Join filename onto directory (current directory by default)."""
    if directory is None:
        return filename
    os.makedirs(directory, exist_ok=True)
    return os.path.join(directory, filename)


def format_degrees(deg: float) -> str:
    """45.0 -> '45', 22.5 -> '22.5'."""
    deg = float(deg)
    return str(int(deg)) if deg.is_integer() else repr(deg)


def format_row(shape: PlacedShape) -> str:
    return (f"{shape.id},"
            f"{round_half_up(shape.x)},"
            f"{round_half_up(shape.y)},"
            f"{format_degrees(shape.rotation)}")


def format_csv(shapes: Sequence[PlacedShape]) -> str:
    lines = [CSV_HEADER] + [format_row(s) for s in shapes]
    return "\n".join(lines) + "\n"


def export_filename(packing) -> str:
    """trees_<placed>_score_<score>.csv, named after what was actually placed."""
    return f"trees_{packing.placed_count}_score_{packing.display_score:.0f}.csv"


def write_csv(packing_or_shapes, output_path: Optional[str] = None) -> str:
    """
    Write placements as CSV.

    Accepts a Packing or a plain list of PlacedShape. Without an explicit
    path a Packing is written under export_filename().
    """
    shapes = getattr(packing_or_shapes, "shapes", packing_or_shapes)
    if output_path is None:
        if not hasattr(packing_or_shapes, "shapes"):
            raise ValueError("output_path is required when writing a bare shape list")
        output_path = get_output_path(export_filename(packing_or_shapes))
    if not shapes:
        raise ValueError("Nothing to export: no shapes were placed")

    with open(output_path, "w", newline="") as f:
        f.write(format_csv(shapes))

    return output_path


def parse_row(line: str, line_no: int) -> PlacedShape:
    parts = line.strip().split(",")
    if len(parts) != 4:
        raise ValueError(f"Line {line_no}: expected 4 fields, got {len(parts)}")
    try:
        return PlacedShape(int(parts[0]), int(parts[1]), int(parts[2]), float(parts[3]))
    except ValueError as e:
        raise ValueError(f"Line {line_no}: {e}") from e


def read_csv(path: str) -> List[PlacedShape]:
    """Read placements back from an exported CSV."""
    with open(path, "r") as f:
        lines = [line for line in f.read().splitlines() if line.strip()]

    if not lines or lines[0].strip() != CSV_HEADER:
        header = lines[0].strip() if lines else ""
        raise ValueError(f"Invalid header: {header!r}")

    return [parse_row(line, i) for i, line in enumerate(lines[1:], start=2)]


def validate_csv_format(path: str) -> Tuple[bool, Optional[str]]:
    """Check an exported CSV without raising."""
    try:
        shapes = read_csv(path)
    except OSError as e:
        return False, f"Cannot read file: {e}"
    except ValueError as e:
        return False, str(e)

    if not shapes:
        return False, "No rows"

    ids = [s.id for s in shapes]
    if len(set(ids)) != len(ids):
        return False, "Duplicate ids"

    return True, None
