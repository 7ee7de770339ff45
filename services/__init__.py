"""Service layer for eligibility evaluation and application submission."""

from .application import ApplicationCoordinator, Submission
from .evaluation import EligibilityStatus, EligibilityVerdict, evaluate
from .profile import assemble_profile
from .requirements import JobRequirementService, normalize_branches
from .sweeper import PendingDecisionSweeper, SweepManifest

__all__ = [
    "ApplicationCoordinator",
    "EligibilityStatus",
    "EligibilityVerdict",
    "JobRequirementService",
    "PendingDecisionSweeper",
    "Submission",
    "SweepManifest",
    "assemble_profile",
    "evaluate",
    "normalize_branches",
]
