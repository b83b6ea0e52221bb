"""Shared vocabulary: violation kinds and severities."""

from enum import Enum

# Layer assigned to files that sit under no recognized typed folder
UNCLASSIFIED = "UNCLASSIFIED"


class Severity(str, Enum):
    """How strongly a violation fails the run."""

    ERROR = "error"
    WARNING = "warning"


class ViolationKind(Enum):
    """Closed set of reportable findings.

    The value is the configuration key used in the policy ``[severity]``
    table; ``label`` is the name shown in reports.
    """

    ILLEGAL_DEPENDENCY = "illegal_dependency"
    NAMING = "naming"
    FILE_SIZE = "file_size"
    PART_FILE_CONVENTION = "part_file_convention"
    STRUCTURE = "structure"
    PARSE_ERROR = "parse_error"
    IO_ERROR = "io_error"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_file_error(self) -> bool:
        """True for kinds that mean a file was skipped, not a finding."""
        return self in (ViolationKind.PARSE_ERROR, ViolationKind.IO_ERROR)


_LABELS = {
    ViolationKind.ILLEGAL_DEPENDENCY: "IllegalDependency",
    ViolationKind.NAMING: "NamingViolation",
    ViolationKind.FILE_SIZE: "FileSizeViolation",
    ViolationKind.PART_FILE_CONVENTION: "PartFileConventionViolation",
    ViolationKind.STRUCTURE: "StructureViolation",
    ViolationKind.PARSE_ERROR: "ParseError",
    ViolationKind.IO_ERROR: "IOError",
}

DEFAULT_SEVERITIES: dict[ViolationKind, Severity] = {
    ViolationKind.ILLEGAL_DEPENDENCY: Severity.ERROR,
    ViolationKind.NAMING: Severity.ERROR,
    ViolationKind.FILE_SIZE: Severity.WARNING,
    ViolationKind.PART_FILE_CONVENTION: Severity.WARNING,
    ViolationKind.STRUCTURE: Severity.WARNING,
    ViolationKind.PARSE_ERROR: Severity.ERROR,
    ViolationKind.IO_ERROR: Severity.ERROR,
}
