"""
Exception types for VENOMAP.

Every error raised by the pipeline derives from PipelineError so the CLI
can report it and abort the run.
"""

from typing import Optional


class PipelineError(Exception):
    """Base exception for all pipeline errors."""
    pass


class RecordNotFoundError(PipelineError, KeyError):
    """A requested identifier is absent from a sequence store or table."""

    def __init__(self, record_id: str, source: str = ""):
        super().__init__(record_id)
        self.record_id = record_id
        self.source = source

    def __str__(self):
        if self.source:
            return f"Record '{self.record_id}' not found in {self.source}"
        return f"Record '{self.record_id}' not found"


class ConsistencyError(PipelineError):
    """Two data sources that must agree do not."""

    def __init__(self, message: str, record_id: str = ""):
        super().__init__(message)
        self.record_id = record_id

    def __str__(self):
        if self.record_id:
            return f"Consistency error for {self.record_id}: {super().__str__()}"
        return super().__str__()


class FormatError(PipelineError):
    """A malformed row or identifier in an input file."""

    def __init__(self, message: str, filename: str = "", line_number: int = 0):
        super().__init__(message)
        self.filename = filename
        self.line_number = line_number

    def __str__(self):
        if self.filename and self.line_number:
            return f"Format error in {self.filename} at line {self.line_number}: {super().__str__()}"
        elif self.filename:
            return f"Format error in {self.filename}: {super().__str__()}"
        return super().__str__()


class PipelineIOError(PipelineError, OSError):
    """An input file could not be opened, read or decompressed."""

    def __init__(self, message: str, filename: str = ""):
        super().__init__(message)
        self.filename = filename

    def __str__(self):
        if self.filename:
            return f"Cannot read {self.filename}: {self.args[0]}"
        return str(self.args[0])


class CollaboratorError(PipelineError):
    """An external tool failed or produced no usable output."""

    def __init__(self, tool: str, message: str, stderr: Optional[str] = None):
        super().__init__(message)
        self.tool = tool
        self.stderr = stderr

    def __str__(self):
        return f"{self.tool} failed: {super().__str__()}"


class ConfigurationError(PipelineError):
    """Invalid pipeline configuration."""
    pass
