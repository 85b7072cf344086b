"""
Haven Site Intelligence: normalize an address, query a jurisdiction's public
GIS / legislative / open-data sources in parallel, and score the result.
"""

__version__ = "1.0.0"
