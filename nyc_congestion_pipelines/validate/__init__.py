# __init__ for validate utils


from .core import run_validation_checks, missing_summary, show_missing_summary
from .engineered_checks import (
    engineered_quality_report,
    validate_engineered_schema,
    validate_no_missing,
    validate_daily_grid,
)
from .orchestrator import run_validations, run_engineered_validations

__all__ = [
    # Core validation
    "run_validation_checks",
    "missing_summary",
    "show_missing_summary",

    # Engineered dataset validation
    "engineered_quality_report",
    "validate_engineered_schema",
    "validate_no_missing",
    "validate_daily_grid",

    # Orchestrators
    "run_validations",
    "run_engineered_validations",
]
