"""
Base exception for the parsing core.

Every exception raised on purpose inside the pipeline derives from
MoneybookError. Its message is written for the end user (Korean, no
provider payloads), so entry points can surface it verbatim. Anything
that is NOT a MoneybookError is treated as an opaque transport failure.
"""


class MoneybookError(Exception):
    """Base exception with a user-displayable message."""
    pass
