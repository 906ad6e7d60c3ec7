from .idea import BusinessIdea
from .report import ValidationReport

__all__ = ["BusinessIdea", "ValidationReport"]
