"""Exception hierarchy for http-ast.

Only input validation errors escape a parse call. Structural problems
(bad request line, broken curl quoting) are raised inside the pipeline and
converted into error-shaped results by the segment parser, so one broken
request never aborts the rest of the document.

    HttpAstError (exit 1)
    +-- InputValidationError  (exit 2)
    +-- ConfigError           (exit 2)
    +-- RequestLineError      (exit 3)
    +-- CurlSyntaxError       (exit 3)
"""

EXIT_GENERIC_FAILURE = 1
EXIT_INVALID_INPUT = 2
EXIT_PARSE_ERROR = 3


class HttpAstError(Exception):
    """Base exception for all http-ast errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class InputValidationError(HttpAstError, TypeError):
    """Raised when the parser is handed something other than text."""

    exit_code = EXIT_INVALID_INPUT


class ConfigError(HttpAstError):
    """Raised for invalid parser options or an unreadable config file."""

    exit_code = EXIT_INVALID_INPUT


class RequestLineError(HttpAstError):
    """Raised when a request line carries an invalid method token."""

    exit_code = EXIT_PARSE_ERROR

    def __init__(self, message: str, line_number: int | None = None):
        super().__init__(message)
        self.line_number = line_number


class CurlSyntaxError(HttpAstError):
    """Raised when a curl command cannot be tokenized (e.g. unbalanced quotes)."""

    exit_code = EXIT_PARSE_ERROR

    def __init__(self, message: str, line_number: int | None = None):
        super().__init__(message)
        self.line_number = line_number
