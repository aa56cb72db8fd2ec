from .core import OverlayAccumulationIndicator, OVERLAY_ACCUMULATION_INDICATOR
