"""Exception taxonomy for insight generation.

    AgentError
    ├── AgentConfigurationError   credential missing or rejected (401/403)
    ├── AgentConnectionError      backend unreachable
    ├── AgentTimeoutError         backend request exceeded its timeout
    ├── AgentExecutionError       a stage or transition failed outright
    └── ClientError
        └── GatewayClientError    backend answered with another error status

Malformed generated content is not an exception; it is absorbed by the
schema validator and the fallback synthesizer. Names avoid the builtin
ConnectionError and TimeoutError.
"""


class AgentError(Exception):
    """Root of every error raised while generating insights."""

    def __init__(self, message: str, stage: str | None = None) -> None:
        self.stage = stage
        super().__init__(message)


class AgentConfigurationError(AgentError):
    """The completion backend cannot be used with the configured credential.

    Never retried: the operator has to fix the configuration.
    """

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        rejected: bool = False,
    ) -> None:
        self.setting = setting
        self.rejected = rejected
        super().__init__(message)


class AgentConnectionError(AgentError):
    """No response from the completion backend."""

    def __init__(self, message: str, service: str, url: str | None = None) -> None:
        self.service = service
        self.url = url
        super().__init__(message)


class AgentTimeoutError(AgentError):
    """A backend request ran past its timeout."""

    def __init__(
        self,
        message: str,
        operation: str,
        timeout_seconds: float | None = None,
    ) -> None:
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        super().__init__(message)


class AgentExecutionError(AgentError):
    """A stage produced nothing usable, or the run hit an illegal transition.

    Args:
        message: Error description
        step: Pipeline state or operation that failed
        cause: Underlying exception, chained as ``__cause__``
    """

    def __init__(
        self,
        message: str,
        step: str,
        cause: Exception | None = None,
    ) -> None:
        self.step = step
        self.cause = cause
        if cause:
            self.__cause__ = cause
        super().__init__(message, stage=step)


class ClientError(AgentError):
    """An external service answered with an error."""

    def __init__(
        self,
        message: str,
        service_name: str,
        status_code: int | None = None,
    ) -> None:
        self.service_name = service_name
        self.status_code = status_code
        super().__init__(message)


class GatewayClientError(ClientError):
    """The completion backend returned an HTTP error other than 401/403."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, "completion-backend", status_code)
