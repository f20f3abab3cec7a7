from .driver import Driver
from .session import BrowserSession, normalize_cookies

__all__ = ["Driver", "BrowserSession", "normalize_cookies"]
