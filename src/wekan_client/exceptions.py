"""wekan-client custom exceptions.

Exception Design Principles:
1. Use these custom exceptions only when additional useful context can be provided
2. Let httpx exceptions propagate from request plumbing; callers know best how to react
3. Split on domain of actionable information:
   - Recoverable by user reconfiguration (ConfigError)
   - Recovered automatically by retrying (LoginError)
   - Terminal for the client instance (ClosedError)
   - Ordinary lookup misses (NotFoundError)
"""


class WekanError(Exception):
    """Base exception for all wekan-client errors.

    Provides rich context and actionable suggestions beyond standard exceptions.
    All wekan-client custom exceptions inherit from this base class.
    """

    def __init__(
        self,
        message: str,  # the error message
        *,
        errors: list[str] = None,  # detailed list of errors (if available)
        suggestions: list[str] = None,  # remedial actions
        context: dict = None,  # additional detailed context
    ):
        """Initialize WekanError.

        Args:
            message: Primary error message for users
            errors: List of specific error details
            suggestions: List of actionable suggestions for resolution
            context: Additional context information as key-value pairs
        """
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.context = context or {}


class ConfigError(WekanError):
    """Client configuration errors - recoverable by user reconfiguration.

    Raised before any network traffic happens, e.g. when no username is
    configured for the client to log in with.
    """

    pass


class LoginError(WekanError):
    """A single login or register call failed.

    Covers everything that can go wrong with one attempt: network errors,
    unexpected status codes, a 400 carrying the server's reason, and response
    bodies that cannot be decoded. The session manager treats all of them
    alike and retries; they only reach callers who use the login transport
    directly.
    """

    pass


class ClosedError(WekanError):
    """The session manager has been shut down.

    Raised for every pending and every future token request once the client
    is closed. A closed client cannot be reopened.
    """

    def __init__(self, message: str = "session manager is closed", **kwargs):
        super().__init__(message, **kwargs)


class NotFoundError(WekanError):
    """The server answered with an empty body where a resource was expected.

    Wekan does not send 404 for most missing resources; it replies 200 with
    no content instead.
    """

    pass
