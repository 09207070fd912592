"""
Utility functions for image decoding, file I/O and color space conversion.
"""
