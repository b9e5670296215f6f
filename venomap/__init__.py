"""
VENOMAP - Venom transcriptome toxin annotation and mapping.
"""

__version__ = "0.1.0"

from .config import (
    ClassifierConfig,
    KallistoConfig,
    PipelineConfig,
    SignalPConfig,
)
from .exceptions import (
    CollaboratorError,
    ConfigurationError,
    ConsistencyError,
    FormatError,
    PipelineError,
    PipelineIOError,
    RecordNotFoundError,
)

__all__ = [
    "PipelineConfig",
    "ClassifierConfig",
    "SignalPConfig",
    "KallistoConfig",
    "PipelineError",
    "RecordNotFoundError",
    "ConsistencyError",
    "FormatError",
    "PipelineIOError",
    "CollaboratorError",
    "ConfigurationError",
    "__version__",
]
