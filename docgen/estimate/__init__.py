"""
Estimate module - Prices cost estimates into a ledger.
"""

from .compiler import (
    OVERHEAD_RATE,
    TAX_RATE,
    FeatureLine,
    SectionTotal,
    EstimateLedger,
    compile_estimate,
    ledger_to_json,
)

__all__ = [
    'OVERHEAD_RATE',
    'TAX_RATE',
    'FeatureLine',
    'SectionTotal',
    'EstimateLedger',
    'compile_estimate',
    'ledger_to_json',
]
