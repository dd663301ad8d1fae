"""
Tests for workflow state tracking and results.
"""
import pytest

from fuel_accounts_sdk.workflow import (
    ContractTransferResult,
    TransferResult,
    WithdrawalResult,
    WorkflowRun,
    WorkflowState,
)


def test_states_only_move_forward():
    run = WorkflowRun("transfer")
    run.advance(WorkflowState.ASSEMBLING)
    run.advance(WorkflowState.RECONCILING_FEE)

    with pytest.raises(ValueError, match="cannot go from"):
        run.advance(WorkflowState.ASSEMBLING)
    with pytest.raises(ValueError):
        run.advance(WorkflowState.RECONCILING_FEE)


def test_running_marks_done():
    run = WorkflowRun("transfer")
    with run.running():
        run.advance(WorkflowState.EXTRACTING_RESULT)
    assert run.state is WorkflowState.DONE
    assert run.failure_reason is None


def test_running_marks_failure_and_reraises():
    run = WorkflowRun("transfer")
    with pytest.raises(RuntimeError):
        with run.running():
            run.advance(WorkflowState.SIGNING)
            raise RuntimeError("no signer")

    assert run.state is WorkflowState.FAILED
    assert run.failed_in is WorkflowState.SIGNING
    assert run.failure_reason == "RuntimeError: no signer"
    assert run.history[-1] is WorkflowState.FAILED


def test_finished_run_cannot_advance():
    run = WorkflowRun("transfer")
    run.fail("boom")
    with pytest.raises(ValueError, match="already finished"):
        run.advance(WorkflowState.ASSEMBLING)


def test_results_unpack_like_tuples():
    tx_id, receipts = TransferResult("0x01", ["r"])
    assert (tx_id, receipts) == ("0x01", ["r"])

    tx_id, receipts = ContractTransferResult("0x02")
    assert receipts == []

    tx_id, nonce, receipts = WithdrawalResult("0x03", "0x04")
    assert nonce == "0x04"
