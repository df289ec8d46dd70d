"""Error taxonomy for the variant inspector."""


class InspectorError(Exception):
    """Base class for variant inspector errors."""

    pass


class LookupFailure(InspectorError):
    """Raised when the annotation service fails or returns malformed data."""

    pass


class PersistenceError(InspectorError):
    """Raised when alternatives cannot be saved back to the job store."""

    pass


class MissingContextError(InspectorError):
    """Raised when an operation needs a job identifier and none is set."""

    pass


class VariantParseError(InspectorError):
    """Raised when a variant record cannot be built from its input."""

    pass


class ReportStoreError(InspectorError):
    """Raised when the report marks file cannot be read."""

    pass
