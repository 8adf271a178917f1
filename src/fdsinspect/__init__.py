"""
fdsinspect
==========
Checks an FDS fire-simulation model against a set of domain rules and
summarises its key parameters.

The MODEL layer (``fdsinspect.model``) holds the parsed records and the
derived concepts (burners, flow vents, growth rates, ceiling heights).
``fdsinspect.verification`` runs the rule catalogue and
``fdsinspect.summary`` aggregates the statistics record.

The package never configures logging itself. Applications call
``fdsinspect.setup_logging()`` once at startup, then load their inputs with
``fdsinspect.io.load_fds_data`` / ``load_smv_data``.
"""
from fdsinspect.logging_config import setup_logging
from fdsinspect.model.fds import FdsData
from fdsinspect.output.smv import SmvData
from fdsinspect.summary import InputSummary, count_cells, summarise_input
from fdsinspect.verification.checks import STD_TEST_LIST
from fdsinspect.verification.engine import (
    Stage,
    Test,
    VerificationOutcome,
    clear_success_summary,
    run_checks,
    verify_input,
)

__all__ = [
    "FdsData",
    "SmvData",
    "InputSummary",
    "count_cells",
    "summarise_input",
    "STD_TEST_LIST",
    "Stage",
    "Test",
    "VerificationOutcome",
    "clear_success_summary",
    "run_checks",
    "verify_input",
    "setup_logging",
]
