"""
Generator module - Document and wireframe generation pipeline.

- GenerationOrchestrator: ownership, credits, backend call, validation,
  persistence and debit for each unit of work
- Wireframe producers: tree / html / preview artifact variants
- run_batch: concurrent per-screen generation with a status map
"""

from .producers import (
    WorkUnit,
    WireframeProducer,
    TreeWireframeProducer,
    HtmlWireframeProducer,
    PreviewWireframeProducer,
    create_producer,
)
from .batch import ScreenStatus, BatchResult, run_batch
from .orchestrator import GenerationOrchestrator

__all__ = [
    'WorkUnit',
    'WireframeProducer',
    'TreeWireframeProducer',
    'HtmlWireframeProducer',
    'PreviewWireframeProducer',
    'create_producer',
    'ScreenStatus',
    'BatchResult',
    'run_batch',
    'GenerationOrchestrator',
]
