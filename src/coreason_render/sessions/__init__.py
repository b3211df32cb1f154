from .base import PlaywrightSession
from .cdp import CDPBrowserSession
from .local import LocalBrowserSession

__all__ = ["CDPBrowserSession", "LocalBrowserSession", "PlaywrightSession"]
