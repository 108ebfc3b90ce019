"""Failure types raised inside a browser attempt.

Every one of these is retryable under the retry orchestrator. Selectors that
match nothing are not errors and have no type here.
"""


class ScraperError(Exception):
    """Base class for failures of a scraping operation."""


class LaunchError(ScraperError):
    """The headless browser or its page context could not be started."""


class NavigationError(ScraperError):
    """The page could not be loaded."""


class NavigationTimeoutError(NavigationError):
    """The page did not reach the completeness criterion in time."""


class TableNotFoundError(ScraperError):
    def __init__(self, selector: str):
        self.selector = selector
        super().__init__(f"Table not found for selector: {selector}")
