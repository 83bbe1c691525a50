from .records import InspectionOutcome, InspectionRecord, InspectionReport

__all__ = [
    "InspectionOutcome",
    "InspectionRecord",
    "InspectionReport",
]
