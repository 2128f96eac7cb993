class QueryTraceError(Exception):
    """Base class for all querytrace exceptions."""
    pass

class ConfigurationError(QueryTraceError):
    """Raised when a required option is missing or invalid."""
    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original: {str(self.original_exception)})"
        return self.message

class TracingError(QueryTraceError):
    """Raised when a tracer is driven out of order (e.g. finishing with no open span)."""
    pass

class QueryError(QueryTraceError):
    """Error reported on a query span when the query itself failed."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message
