"""Errors raised by page objects.

Every failure carries the selector (or URL) that was being acted on and the
underlying Playwright error, so a failing test step names what it touched.
"""

from typing import Optional


class PageActionError(Exception):
    """A browser action issued by a page object did not complete."""

    def __init__(self, message: str, selector: Optional[str] = None, cause: Optional[BaseException] = None):
        self.selector = selector
        self.cause = cause
        detail = message
        if selector:
            detail = f'{detail} [selector: {selector}]'
        if cause is not None:
            detail = f'{detail}: {cause}'
        super().__init__(detail)


class ElementTimeoutError(PageActionError):
    """A wait condition was not met within its timeout."""


class ValidationMismatchError(PageActionError):
    """A filled field read back a different value than the one written."""

    def __init__(self, selector: str, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f'Field value mismatch: expected {expected!r}, got {actual!r}', selector=selector)


class NavigationError(PageActionError):
    """A navigation or URL wait did not settle."""

    def __init__(self, url: str, cause: Optional[BaseException] = None, message: str = 'Navigation failed'):
        self.url = url
        super().__init__(f'{message} for {url}', cause=cause)
