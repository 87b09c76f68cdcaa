"""
Status Workflow Engine - administrative state machine for reports.

DESIGN PRINCIPLES:
- OVERDUE is entered only by the overdue sweep, never by hand
- RESOLVED is terminal
- Invalid transitions rejected programmatically
"""

from typing import Dict, List

from saarthi.models.report import ReportStatus


class StatusWorkflowEngine:
    """
    Allowed manual transitions:

    pending -> in-progress | resolved
    in-progress -> resolved
    overdue -> resolved
    resolved -> (none)
    """

    ALLOWED_TRANSITIONS: Dict[ReportStatus, List[ReportStatus]] = {
        ReportStatus.PENDING: [ReportStatus.IN_PROGRESS, ReportStatus.RESOLVED],
        ReportStatus.IN_PROGRESS: [ReportStatus.RESOLVED],
        ReportStatus.OVERDUE: [ReportStatus.RESOLVED],
        ReportStatus.RESOLVED: [],
    }

    @classmethod
    def is_valid_transition(cls, from_status: str, to_status: str) -> bool:
        try:
            from_enum = ReportStatus(from_status)
            to_enum = ReportStatus(to_status)
        except ValueError:
            return False

        # Same status is a no-op
        if from_enum == to_enum:
            return True

        return to_enum in cls.ALLOWED_TRANSITIONS.get(from_enum, [])

    @classmethod
    def get_allowed_transitions(cls, current_status: str) -> List[str]:
        try:
            current_enum = ReportStatus(current_status)
        except ValueError:
            return []
        return [s.value for s in cls.ALLOWED_TRANSITIONS.get(current_enum, [])]

    @classmethod
    def validate_transition(cls, current_status: str, new_status: str) -> None:
        """
        Raises:
            ValueError: If transition is invalid
        """
        if not cls.is_valid_transition(current_status, new_status):
            allowed = cls.get_allowed_transitions(current_status)
            raise ValueError(
                f"Invalid status transition: {current_status} → {new_status}. "
                f"Allowed transitions from {current_status}: {allowed}"
            )
