"""Classification of a completed command attempt."""

from enum import Enum

from p4relay.protocols import ResultSink


class Outcome(Enum):
    """What the executor should do after an attempt."""

    CLEAN = "clean"
    RECOVERABLE = "recoverable"
    FATAL = "fatal"


def classify(result: ResultSink, dropped: bool, retries_left: int) -> Outcome:
    """Classify one attempt of a command.

    A fatal-severity error is never retried. A drop or a lesser error is
    recoverable while retries remain and fatal once they are spent.

    Args:
        result: Result sink populated by the attempt
        dropped: Whether the transport lost the connection during the attempt
        retries_left: Remaining retry budget for this command

    Returns:
        The outcome of the attempt
    """
    # A drop is retried even when the attempt also reported a fatal error
    if dropped:
        return Outcome.RECOVERABLE if retries_left > 0 else Outcome.FATAL

    if result.is_fatal:
        return Outcome.FATAL

    if result.is_error:
        return Outcome.RECOVERABLE if retries_left > 0 else Outcome.FATAL

    return Outcome.CLEAN
