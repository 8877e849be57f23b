"""
voronav - nearest-site navigation partition for a single page.
"""

__version__ = "0.1.0"
