from .core import ShareIndicator, SHARE_INDICATOR
