"""sheetflow - paginated rich-text editing on fixed-size sheets."""

from .config import ConfigError, PageConfig
from .decorations import Decoration, DecorationRenderer, DecorationSet
from .geometry import BlockGeometry, GeometryProbe, GeometryUnavailable, TextLayoutProbe
from .model import ChangeEvent, ChangeMapping, ContentNode, Document, Host
from .page_mask import MaskLayer, PageMaskSynchronizer, TextMaskLayer
from .pagination import Paginator, paginate
from .planner import BinarySearchExhausted, BreakDescriptor, BreakPlanner, PaginationPlan, Side
from .scheduler import DeferredQueue, HostTornDown, RecomputeScheduler
from .state import BreakStateStore, PaginationState

__all__ = [
    'BinarySearchExhausted',
    'BlockGeometry',
    'BreakDescriptor',
    'BreakPlanner',
    'BreakStateStore',
    'ChangeEvent',
    'ChangeMapping',
    'ConfigError',
    'ContentNode',
    'Decoration',
    'DecorationRenderer',
    'DecorationSet',
    'DeferredQueue',
    'Document',
    'GeometryProbe',
    'GeometryUnavailable',
    'Host',
    'HostTornDown',
    'MaskLayer',
    'PageConfig',
    'PageMaskSynchronizer',
    'PaginationPlan',
    'PaginationState',
    'Paginator',
    'RecomputeScheduler',
    'Side',
    'TextLayoutProbe',
    'TextMaskLayer',
    'paginate',
]
