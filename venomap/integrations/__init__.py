"""
External tool integrations for VENOMAP.
"""

from .classifier import (
    ClassifierResult,
    ClassifierRunner,
)
from .kallisto import (
    KallistoRunner,
    QuantificationResult,
    parse_version,
)
from .signalp import (
    SignalPeptideRunner,
    SignalPResult,
)

__all__ = [
    'ClassifierRunner',
    'ClassifierResult',
    'SignalPeptideRunner',
    'SignalPResult',
    'KallistoRunner',
    'QuantificationResult',
    'parse_version',
]
