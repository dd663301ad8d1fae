"""
Workflow state tracking and results.

Each account workflow is a straight line of states with a single failure exit;
nothing is retried. `WorkflowRun` records the path taken so failures can be
reported with the state they happened in.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional


class WorkflowState(str, Enum):
    SELECTING_INPUTS = "SelectingInputs"
    ASSEMBLING = "Assembling"
    RECONCILING_FEE = "ReconcilingFee"
    SIGNING = "Signing"
    BUILDING = "Building"
    SUBMITTING = "Submitting"
    AWAITING_COMMIT = "AwaitingCommit"
    EXTRACTING_RESULT = "ExtractingResult"
    DONE = "Done"
    FAILED = "Failed"


_ORDER = [
    WorkflowState.SELECTING_INPUTS,
    WorkflowState.ASSEMBLING,
    WorkflowState.RECONCILING_FEE,
    WorkflowState.SIGNING,
    WorkflowState.BUILDING,
    WorkflowState.SUBMITTING,
    WorkflowState.AWAITING_COMMIT,
    WorkflowState.EXTRACTING_RESULT,
    WorkflowState.DONE,
]


class WorkflowRun:
    """Tracks one workflow invocation through its states"""

    def __init__(self, name: str, logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or logging.getLogger(__name__)
        self.state = WorkflowState.SELECTING_INPUTS
        self.history: List[WorkflowState] = [self.state]
        self.failure_reason: Optional[str] = None
        self.failed_in: Optional[WorkflowState] = None

    def advance(self, state: WorkflowState) -> None:
        """
        Move to `state`.

        Raises:
            ValueError: If `state` is not ahead of the current state
        """
        if self.state in (WorkflowState.DONE, WorkflowState.FAILED):
            raise ValueError(f"{self.name} already finished in state {self.state.value}")
        if state is WorkflowState.FAILED or _ORDER.index(state) <= _ORDER.index(self.state):
            raise ValueError(f"{self.name} cannot go from {self.state.value} to {state.value}")
        self.logger.debug(f"{self.name}: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def fail(self, reason: str) -> None:
        self.failed_in = self.state
        self.failure_reason = reason
        self.logger.debug(f"{self.name}: {self.state.value} -> Failed ({reason})")
        self.state = WorkflowState.FAILED
        self.history.append(WorkflowState.FAILED)

    @contextmanager
    def running(self) -> Iterator["WorkflowRun"]:
        """Mark the run done on exit, or failed if an exception escapes"""
        try:
            yield self
        except Exception as e:
            self.fail(f"{type(e).__name__}: {e}")
            raise
        self.advance(WorkflowState.DONE)


@dataclass(frozen=True)
class TransferResult:
    tx_id: str
    receipts: List[Any] = field(default_factory=list)

    def __iter__(self):
        return iter((self.tx_id, self.receipts))


@dataclass(frozen=True)
class ContractTransferResult:
    tx_id: str
    receipts: List[Any] = field(default_factory=list)

    def __iter__(self):
        return iter((self.tx_id, self.receipts))


@dataclass(frozen=True)
class WithdrawalResult:
    tx_id: str
    nonce: str
    receipts: List[Any] = field(default_factory=list)

    def __iter__(self):
        return iter((self.tx_id, self.nonce, self.receipts))
