"""
playwright-video - Record scripted browser choreography as video.
"""

__version__ = "0.1.0"
