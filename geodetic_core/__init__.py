"""Geodetic coordinate and geometry core.

Latitude/longitude/altitude values, free-form coordinate text parsing,
antimeridian-aware bounding-box algebra, polygon containment and overlap,
and deduplicated vertex/index tessellation blocks for renderers.
"""

__version__ = "0.1.0"
