"""
Custom exception classes for the dashboard engine.

Data problems never raise inside the engine; they degrade to safe defaults.
These exceptions cover caller mistakes (contract violations) and the
loading layer, with a status code the hosting application can map to a
4xx/5xx response.
"""


class AppException(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ContractViolationError(AppException):
    """Raised when the engine is called in a way its contract does not allow."""
    def __init__(self, message: str = "Invalid call into the dashboard engine."):
        super().__init__(message, status_code=500)


class UnsupportedReducerError(ContractViolationError):
    """Raised when aggregation is asked for a reducer kind it does not know."""
    def __init__(self, reducer: object):
        self.reducer = reducer
        super().__init__(f"Unsupported reducer kind: {reducer!r}")


class UnknownFilterError(ContractViolationError):
    """Raised when a session is asked to change a filter id it does not hold."""
    def __init__(self, filter_id: str):
        self.filter_id = filter_id
        super().__init__(f"No filter with id {filter_id!r}")


class FileProcessingError(AppException):
    """Raised when file upload or parsing fails."""
    def __init__(self, message: str = "Failed to process the uploaded file."):
        super().__init__(message, status_code=400)


class DatasetError(AppException):
    """Raised when a dataset cannot be built from the given table."""
    def __init__(self, message: str = "The dataset is invalid."):
        super().__init__(message, status_code=400)
