"""Feed acquisition pipeline orchestration."""

from src.acquisition.constants import DAYS_IN_MONTH
from src.acquisition.factory import build_client_config, build_orchestrator
from src.acquisition.orchestrator import (
    AcquisitionOrchestrator,
    FeedSource,
    validate_date,
)
from src.acquisition.state_machine import (
    AcquisitionState,
    AcquisitionStateMachine,
    AcquisitionStateTransitionError,
)


__all__ = [
    "DAYS_IN_MONTH",
    "AcquisitionOrchestrator",
    "AcquisitionState",
    "AcquisitionStateMachine",
    "AcquisitionStateTransitionError",
    "FeedSource",
    "build_client_config",
    "build_orchestrator",
    "validate_date",
]
