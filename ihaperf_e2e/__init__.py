from .config import BrowserConfig, BrowserName, RunConfig, WaitUntil, load_config
from .errors import ElementTimeoutError, NavigationError, PageActionError, ValidationMismatchError

__all__ = [
    "BrowserConfig",
    "BrowserName",
    "RunConfig",
    "WaitUntil",
    "load_config",
    "PageActionError",
    "ElementTimeoutError",
    "ValidationMismatchError",
    "NavigationError",
]
