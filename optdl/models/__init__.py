"""Data models for optdl."""
from optdl.models.config import ConfigValidationError
from optdl.models.disk import (
    Diagnostic,
    DiagnosticSeverity,
    DesiredState,
    DiskState,
    Ensure,
    ManagedDiskInfo,
    OpticalDriveRecord,
    ProbeOutcome,
    ProbeResult,
    VolumeHandle,
)

__all__ = [
    'ConfigValidationError',
    'Diagnostic',
    'DiagnosticSeverity',
    'DesiredState',
    'DiskState',
    'Ensure',
    'ManagedDiskInfo',
    'OpticalDriveRecord',
    'ProbeOutcome',
    'ProbeResult',
    'VolumeHandle',
]
