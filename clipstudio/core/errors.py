"""Exception types raised by the prompt pipeline"""


class ClipStudioError(Exception):
    """Base class for pipeline errors"""


class ContractViolationError(ClipStudioError):
    """
    Raised when a collaborator hands the pipeline malformed input
    (e.g. a string where a list of URLs is expected).

    Never raised for degradable conditions such as missing images or assets.
    """
