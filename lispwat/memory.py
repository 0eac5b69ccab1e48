"""
lispwat Linear Memory

Builds the initial linear-memory image a module's data segments describe,
and finds segments that overwrite each other.
"""

from typing import List, Sequence, Tuple

import numpy as np

from .instructions import OpData
from .errors import MemoryLayoutError

# WebAssembly page size in bytes
PAGE_SIZE = 65536


def segment_span(segment: OpData) -> Tuple[int, int]:
    """Return the half-open byte range [start, end) a segment covers."""
    start = segment.offset
    return start, start + len(segment.data)


def build_memory_image(segments: Sequence[OpData], pages: int = 1) -> np.ndarray:
    """
    Lay data segments out in a zeroed memory image.
    
    Segments are applied in order, so a later segment overwrites the
    bytes of an earlier one it overlaps, as the host does at instantiation.
    
    Args:
        segments: Data segments in module order
        pages: Number of 64KiB memory pages
        
    Returns:
        uint8 array of pages * PAGE_SIZE bytes
        
    Raises:
        MemoryLayoutError: If a segment falls outside the memory
    """
    image = np.zeros(pages * PAGE_SIZE, dtype=np.uint8)
    
    for segment in segments:
        start, end = segment_span(segment)
        if start < 0 or end > len(image):
            raise MemoryLayoutError(
                f"Data segment [{start}, {end}) does not fit in {pages} page(s)"
            )
        image[start:end] = np.frombuffer(segment.data, dtype=np.uint8)
    
    return image


def overlapping_segments(segments: Sequence[OpData]) -> List[Tuple[int, int]]:
    """
    Find pairs of segments whose byte ranges intersect.
    
    Returns:
        (earlier index, later index) pairs, in order
    """
    if not segments:
        return []
    
    spans = np.array([segment_span(s) for s in segments], dtype=np.int64)
    starts = spans[:, 0]
    ends = spans[:, 1]
    
    # Empty segments cover no bytes
    non_empty = ends > starts
    intersects = (
        (starts[:, None] < ends[None, :])
        & (starts[None, :] < ends[:, None])
        & non_empty[:, None]
        & non_empty[None, :]
    )
    
    first, second = np.nonzero(np.triu(intersects, k=1))
    return [(int(i), int(j)) for i, j in zip(first, second)]
