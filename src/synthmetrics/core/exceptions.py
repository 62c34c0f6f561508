"""Error taxonomy for synthmetrics.

Request errors are raised for bad scenario parameters and map to 4xx
responses. Registry errors signal programming mistakes in metric
declarations or call sites and are never expected at runtime.
"""


class SynthMetricsError(Exception):
    """Base class for all synthmetrics errors."""


class InvalidRequestError(SynthMetricsError, ValueError):
    """Scenario parameters are malformed (negative or non-numeric count)."""


class UnknownScenarioError(SynthMetricsError, LookupError):
    """No scenario is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown scenario: {name}")
        self.name = name


class MetricRegistryError(SynthMetricsError):
    """Base class for metric registry misuse."""


class DuplicateMetricError(MetricRegistryError):
    """A metric family with this name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Metric {name!r} is already registered")
        self.name = name


class UnknownMetricError(MetricRegistryError, KeyError):
    """No metric family is registered under this name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Metric {name!r} is not registered")
        self.name = name

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class LabelArityError(MetricRegistryError, ValueError):
    """Label values do not match the declared label names."""

    def __init__(self, name: str, expected: int, got: int) -> None:
        super().__init__(
            f"Metric {name!r} expects {expected} label value(s), got {got}"
        )
        self.name = name
        self.expected = expected
        self.got = got


class MetricKindError(MetricRegistryError, TypeError):
    """The operation does not apply to this metric kind."""

    def __init__(self, name: str, kind: str, operation: str) -> None:
        super().__init__(f"Cannot {operation} {kind} metric {name!r}")
        self.name = name
        self.kind = kind
        self.operation = operation
