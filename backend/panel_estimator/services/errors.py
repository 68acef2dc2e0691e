"""Estimation error taxonomy."""
from typing import List, Optional


class EstimationError(Exception):
    """Base class for every failure that aborts an estimation."""


class InvalidPanelConfiguration(EstimationError):
    """
    Malformed or out-of-range panel configuration (unknown panel type,
    negative counts, empty custom/multi payloads). Nothing is returned.
    """

    def __init__(self, message: str, errors: Optional[List[dict]] = None):
        super().__init__(message)
        self.errors = errors or []


class MandatoryLookupError(EstimationError):
    """
    A component the whole estimate depends on (enclosure, main incomer,
    mandatory rule line) is missing from the catalog.
    """

    def __init__(self, component_code: str, role: str = ""):
        label = f"{role} component" if role else "Mandatory component"
        super().__init__(f"{label} '{component_code}' not found in catalog")
        self.component_code = component_code
        self.role = role
