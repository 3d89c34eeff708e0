"""Optional scripting helpers to log failed steps and convert them to exit codes."""

from __future__ import annotations

from .tc_logging import log


class Interceptor:
    """
    Context manager to intercept the exceptions raised by a step.

    Use as a context manager, optionally naming the step:

        interceptor = tc_exception.Interceptor()
        with interceptor("load"):
            load()
        with interceptor("report"):
            report()
        sys.exit(interceptor.exitcode())

    Exceptions are logged and suppressed, so the following steps still
    run. The failures field lists the (step, exception) pairs.

    Use interceptor.exitcode() to get the suitable exit code
    to pass to the sys.exit() function.
    """

    def __init__(self):
        self.failures: list[tuple[str, BaseException]] = []
        self._step = "operation"

    def __call__(self, step: str) -> Interceptor:
        self._step = step
        return self

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        step, self._step = self._step, "operation"
        if exc_type is None:
            return False
        if issubclass(exc_type, KeyboardInterrupt):
            return False
        log.error("%s failed: %s", step, exc_value)
        _ = traceback
        self.failures.append((step, exc_value))
        return True  # suppress the exception

    @property
    def failed(self) -> bool:
        """Whether any intercepted step failed."""
        return bool(self.failures)

    def exitcode(self) -> int:
        """
        Return the exitcode to pass to sys.exit.

        Zero on success, 1 on failure.
        """
        return int(self.failed)
