"""Project-specific exceptions."""


class MileageRegressionError(Exception):
    """Base exception for the project."""


class MissingRuntimeConfigError(MileageRegressionError):
    """Raised when runtime configuration is missing or invalid."""


class DegenerateInputError(MileageRegressionError):
    """Raised when a dataset cannot be normalized (empty or constant column)."""


class DatasetParseError(MileageRegressionError):
    """Raised when the dataset file is missing or a record cannot be parsed."""


class MalformedModelError(MileageRegressionError):
    """Raised when a persisted weights file cannot be parsed as two numbers."""
