"""objdup — batch duplication of timeline objects.

Public API:
    run, duplicate_selection                  — batch duplication in a host edit section
    duplicate_object                          — duplicate a single object
    target_starts, ByCount, ByLimit           — frame interval policy
    DuplicationRequest, DuplicationResult     — request / result contract
    EditHandle, EditSection                   — host interfaces
    Timeline                                  — in-memory reference host
    validate_request, plan_duplication        — dry-run validation
    ObjDupError                               — structured errors
"""

from objdup.engine import run, duplicate_selection
from objdup.operations import duplicate_object
from objdup.policy import ByCount, ByLimit, target_starts, termination_for
from objdup.models import (
    DuplicationRequest,
    DuplicationResult,
    ObjectRange,
    MODE_COUNT,
    MODE_LIMIT,
)
from objdup.host import EditHandle, EditSection
from objdup.timeline import Timeline, TimelineObject
from objdup.validation import validate_request, plan_duplication, ValidationResult
from objdup.errors import ObjDupError

__version__ = "0.1.0"

__all__ = [
    "run",
    "duplicate_selection",
    "duplicate_object",
    "ByCount",
    "ByLimit",
    "target_starts",
    "termination_for",
    "DuplicationRequest",
    "DuplicationResult",
    "ObjectRange",
    "MODE_COUNT",
    "MODE_LIMIT",
    "EditHandle",
    "EditSection",
    "Timeline",
    "TimelineObject",
    "validate_request",
    "plan_duplication",
    "ValidationResult",
    "ObjDupError",
]
