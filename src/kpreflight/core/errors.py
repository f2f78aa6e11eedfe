"""
Error hierarchy for rule evaluation.

Every fallible step of an evaluation raises one of these. They are all
fatal for the single rule being evaluated; soft exclusions (a node lacking a
property) are never errors. Converting a failed rule into a Fail result is
the job of the runner, not of the core.
"""


class AnalyzeError(Exception):
    """Base class for every error raised while evaluating a rule."""
    pass


class FetchError(AnalyzeError):
    """A collected payload could not be retrieved by key."""
    pass


class DecodeError(AnalyzeError):
    """A collected payload is not the structured data we expected."""
    pass


class ParseError(AnalyzeError):
    """A quantity or conditional string is malformed."""
    pass


class QuantityParseError(ParseError):
    """A resource quantity string does not match the quantity grammar."""
    pass


class FilterError(AnalyzeError):
    """A node failed a label clause; aborts the whole filtering pass."""
    pass


class ConditionalEvaluationError(AnalyzeError):
    """A conditional could not be evaluated against the matching nodes."""
    pass


class ConditionalParseError(ConditionalEvaluationError, ParseError):
    """A conditional string does not match the conditional grammar."""
    pass


class RuleSpecError(AnalyzeError):
    """A rule definition mapping has the wrong shape."""
    pass


__all__ = [
    "AnalyzeError",
    "FetchError",
    "DecodeError",
    "ParseError",
    "QuantityParseError",
    "FilterError",
    "ConditionalEvaluationError",
    "ConditionalParseError",
    "RuleSpecError",
]
