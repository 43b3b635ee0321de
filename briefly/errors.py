"""
Exception hierarchy for the Briefly digest pipeline.

Fatal errors (ConfigError, StoreUnavailableError) abort the run before any
work is done. FeedFetchError and DispatchError are contained per source and
per recipient.
"""


class BrieflyError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(BrieflyError):
    """Missing credentials or an invalid configuration file."""


class StoreUnavailableError(BrieflyError):
    """The subscriber store could not be read."""


class FeedFetchError(BrieflyError):
    """A single source could not be fetched or parsed."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class DispatchError(BrieflyError):
    """A single delivery attempt failed."""

    def __init__(self, recipient: str, detail: str):
        super().__init__(f"{recipient}: {detail}")
        self.recipient = recipient
        self.detail = detail
