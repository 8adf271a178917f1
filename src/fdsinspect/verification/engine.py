"""
Verification Engine
===================
Runs a list of independent checks against a model and, optionally, against
the realised output of the simulation, and flattens their verdicts.

Each check declares a stage:
    IN     - needs only the model; always runs.
    OUT    - needs only the output; skipped if there is none.
    IN_OUT - needs both; skipped if there is no output.

Input checks are plain functions. Output checks are coroutines, since they
may read files. Skipped checks report nothing.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import logging
from typing import Awaitable, Callable, Dict, Any, List, Optional, Sequence, Union

from fdsinspect.model.fds import FdsData
from fdsinspect.output.smv import OutputSource

logger = logging.getLogger(__name__)


class Stage(StrEnum):
    IN = "in"
    OUT = "out"
    IN_OUT = "inout"


class OutcomeType(StrEnum):
    SUCCESS = "success"
    WARNING = "warning"
    FAILURE = "failure"


@dataclass(frozen=True)
class VerificationResult:
    type: OutcomeType
    message: str


@dataclass(frozen=True)
class VerificationOutcome:
    """A result stamped with the id of the check that produced it."""
    id: str
    type: OutcomeType
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type.value, "message": self.message}


def success(message: str) -> VerificationResult:
    return VerificationResult(OutcomeType.SUCCESS, message)


def warning(message: str) -> VerificationResult:
    return VerificationResult(OutcomeType.WARNING, message)


def failure(message: str) -> VerificationResult:
    return VerificationResult(OutcomeType.FAILURE, message)


InputCheck = Callable[[FdsData], List[VerificationResult]]
OutputCheck = Callable[[OutputSource], Awaitable[List[VerificationResult]]]
InputOutputCheck = Callable[[FdsData, OutputSource], Awaitable[List[VerificationResult]]]


@dataclass(frozen=True)
class Test:
    id: str
    stage: Stage
    func: Union[InputCheck, OutputCheck, InputOutputCheck]


def _stamp(test: Test, results: List[VerificationResult]) -> List[VerificationOutcome]:
    return [VerificationOutcome(id=test.id, type=result.type, message=result.message) for result in results]


async def run_checks(
    tests: Sequence[Test],
    fds_data: FdsData,
    smv_data: Optional[OutputSource] = None,
) -> List[VerificationOutcome]:
    """
    Run the checks in order and flatten their results.

    Output-dependent checks are skipped when no output source is given.
    """
    outcomes: List[VerificationOutcome] = []
    for test in tests:
        if test.stage == Stage.IN:
            results = test.func(fds_data)
        elif smv_data is None:
            logger.debug(f"Skipping '{test.id}': no simulation output available")
            continue
        elif test.stage == Stage.OUT:
            results = await test.func(smv_data)
        elif test.stage == Stage.IN_OUT:
            results = await test.func(fds_data, smv_data)
        else:
            raise ValueError(f"Unknown stage '{test.stage}' for check '{test.id}'")
        outcomes.extend(_stamp(test, results))
    logger.info(f"Ran checks on '{fds_data.chid}': {len(outcomes)} outcome(s)")
    return outcomes


def verify_input(tests: Sequence[Test], fds_data: FdsData) -> List[VerificationOutcome]:
    """Run only the input checks, synchronously."""
    outcomes: List[VerificationOutcome] = []
    for test in tests:
        if test.stage != Stage.IN:
            logger.debug(f"Skipping '{test.id}': not an input check")
            continue
        outcomes.extend(_stamp(test, test.func(fds_data)))
    return outcomes


def clear_success_summary(outcomes: Sequence[VerificationOutcome]) -> List[VerificationOutcome]:
    """The outcomes without the successes."""
    return [outcome for outcome in outcomes if outcome.type != OutcomeType.SUCCESS]
