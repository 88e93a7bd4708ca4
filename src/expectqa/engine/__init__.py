"""ExpectQA engine — condition polling and failure diagnostics.

Provides the wait/match/report engine behind every assertion:
- Conditions: ObjectCondition, NegatedCondition, Texts / ExactTexts
- Driver conditions: url, title, number_of_windows, cookie, ...
- PollingEvaluator: retry-until-match loop with timeout and cancellation
- DiagnosticBuilder: typed failures with self-contained messages
- ReportGenerator: markdown failure reports
"""

from expectqa.engine.assertions import Assertable, should_have, should_not_have
from expectqa.engine.conditions import (
    CollectionCondition,
    Condition,
    ExactTexts,
    Mismatch,
    MismatchKind,
    NegatedCondition,
    ObjectCondition,
    Texts,
    condition,
    exact_texts,
    negate,
    normalize_text,
    texts,
)
from expectqa.engine.diagnostics import DiagnosticBuilder, DiagnosticContext, FailureDiagnostic
from expectqa.engine.evaluator import Outcome, PollingEvaluator, PollResult
from expectqa.engine.report_generator import ReportGenerator

__all__ = [
    "Assertable",
    "CollectionCondition",
    "Condition",
    "DiagnosticBuilder",
    "DiagnosticContext",
    "ExactTexts",
    "FailureDiagnostic",
    "Mismatch",
    "MismatchKind",
    "NegatedCondition",
    "ObjectCondition",
    "Outcome",
    "PollResult",
    "PollingEvaluator",
    "ReportGenerator",
    "Texts",
    "condition",
    "exact_texts",
    "negate",
    "normalize_text",
    "should_have",
    "should_not_have",
    "texts",
]
