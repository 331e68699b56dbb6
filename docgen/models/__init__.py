"""
Models - Data structures for documents, screens, wireframes and estimates.
"""

from .documents import (
    DocumentType,
    DOCUMENT_TYPE_LABELS,
    Profile,
    Project,
    Transcription,
    GeneratedDocument,
    ScreenRecord,
    ParsedScreen,
)
from .wireframe import (
    ElementType,
    CHILDREN_TYPES,
    ITEMS_TYPES,
    PLACEHOLDER_TYPES,
    STYLE_PROP_VALUES,
    ICON_NAMES,
    ListItem,
    WireframeElement,
    WireframeScreen,
    Wireframe,
    HtmlWireframe,
    PreviewWireframe,
)
from .estimate import (
    EstimateFeature,
    EstimateSection,
    EstimateRole,
    ChiffrageEstimate,
)

__all__ = [
    # Documents
    'DocumentType',
    'DOCUMENT_TYPE_LABELS',
    'Profile',
    'Project',
    'Transcription',
    'GeneratedDocument',
    'ScreenRecord',
    'ParsedScreen',
    # Wireframes
    'ElementType',
    'CHILDREN_TYPES',
    'ITEMS_TYPES',
    'PLACEHOLDER_TYPES',
    'STYLE_PROP_VALUES',
    'ICON_NAMES',
    'ListItem',
    'WireframeElement',
    'WireframeScreen',
    'Wireframe',
    'HtmlWireframe',
    'PreviewWireframe',
    # Estimates
    'EstimateFeature',
    'EstimateSection',
    'EstimateRole',
    'ChiffrageEstimate',
]
