"""Prompt-to-slideshow: narrated slideshow videos from a text prompt"""

__version__ = "0.1.0"
