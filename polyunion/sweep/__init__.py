"""Martinez-Rueda sweep-line machinery used by :func:`polyunion.union`.

Modules:
    events: Sweep events, their ordering and the event queue
    segments: Segment intersection and sweep-line ordering of edges
    status: Sweep-line status structure
    subdivide: The sweep itself (splitting and classification)
    rings: Reconstruction of rings and polygons from retained edges
"""

from .events import EdgeType, SweepEvent, EventQueue, compare_events, build_event_queue
from .segments import segment_intersection, compare_segments
from .status import SweepLine
from .subdivide import subdivide, possible_intersection, compute_fields
from .rings import connect_edges, split_pinched, build_loops, nest_loops, assemble

__all__ = [
    # Events
    'EdgeType',
    'SweepEvent',
    'EventQueue',
    'compare_events',
    'build_event_queue',

    # Segments
    'segment_intersection',
    'compare_segments',
    'SweepLine',

    # Sweep
    'subdivide',
    'possible_intersection',
    'compute_fields',

    # Reconstruction
    'connect_edges',
    'split_pinched',
    'build_loops',
    'nest_loops',
    'assemble',
]
