from .http_viewport_lookup import BUNDLED_VIEWPORTS_URL, HttpViewportLookup
from .w3counter_resolution_lookup import W3CounterResolutionLookup

__all__ = ["HttpViewportLookup", "W3CounterResolutionLookup", "BUNDLED_VIEWPORTS_URL"]
