import math

from typing import List, Optional


def get_sample_indices(length: int, max_data_points: Optional[int]) -> List[int]:
    """
    Indices to keep when downsampling a series to at most `max_data_points` points.

    Keeps every ceil(length / max_data_points)-th point starting at 0, and always the last
    point. If adding the last point would go over the limit, it replaces the last kept point.
    """
    if not max_data_points or length <= max_data_points:
        return list(range(length))
    if max_data_points < 1:
        raise ValueError(f"max_data_points must be >= 1, got {max_data_points}")

    step = math.ceil(length / max_data_points)
    indices = list(range(0, length, step))
    if indices[-1] != length - 1:
        if len(indices) < max_data_points:
            indices.append(length - 1)
        else:
            indices[-1] = length - 1
    return indices
