"""
lispwat Linear Memory Tests

Tests for memory images built from data segments.
"""

import numpy as np
import pytest
from lispwat import parse_source
from lispwat.emitter import Emitter
from lispwat.instructions import Const, OpData
from lispwat.memory import PAGE_SIZE, build_memory_image, overlapping_segments, segment_span
from lispwat.errors import MemoryLayoutError


class TestMemoryImage:
    """build_memory_image tests."""
    
    def test_single_segment(self):
        image = build_memory_image([OpData(Const(8), b"hi\n")])
        assert image.dtype == np.uint8
        assert len(image) == PAGE_SIZE
        assert image[8:11].tobytes() == b"hi\n"
        assert not image[:8].any()
        assert not image[11:].any()
    
    def test_pages(self):
        assert len(build_memory_image([], pages=2)) == 2 * PAGE_SIZE
    
    def test_later_segment_wins(self):
        image = build_memory_image([
            OpData(Const(8), b"aaaa"),
            OpData(Const(10), b"bb"),
        ])
        assert image[8:12].tobytes() == b"aabb"
    
    def test_segment_past_end(self):
        with pytest.raises(MemoryLayoutError):
            build_memory_image([OpData(Const(PAGE_SIZE - 2), b"abcd")])
    
    def test_segment_at_end_fits(self):
        image = build_memory_image([OpData(Const(PAGE_SIZE - 4), b"abcd")])
        assert image[-4:].tobytes() == b"abcd"
    
    def test_hello_world_layout(self):
        emitter = Emitter()
        emitter.emit(parse_source('(defn main (print "Hello world"))'))
        image = build_memory_image(emitter.data)
        assert image[8:20].tobytes() == b"Hello world\n"


class TestOverlaps:
    """overlapping_segments tests."""
    
    def test_span(self):
        assert segment_span(OpData(Const(8), b"abc")) == (8, 11)
    
    def test_no_segments(self):
        assert overlapping_segments([]) == []
    
    def test_disjoint(self):
        segments = [OpData(Const(8), b"ab"), OpData(Const(10), b"cd")]
        assert overlapping_segments(segments) == []
    
    def test_overlap(self):
        segments = [
            OpData(Const(8), b"abc"),
            OpData(Const(8), b"de"),
            OpData(Const(100), b"f"),
        ]
        assert overlapping_segments(segments) == [(0, 1)]
    
    def test_all_pairs(self):
        segments = [OpData(Const(0), b"xxxx")] * 3
        assert overlapping_segments(segments) == [(0, 1), (0, 2), (1, 2)]
    
    def test_empty_segment_never_overlaps(self):
        segments = [OpData(Const(8), b""), OpData(Const(8), b"abc")]
        assert overlapping_segments(segments) == []
