"""
Iridology Zone Mapper

Segments an iris photograph into fixed polar zones, profiles colour and
texture per zone and turns the results into non-diagnostic wellness
reflection prompts.
"""

__version__ = "0.1.0"
__author__ = "Iridology Mapper Team"
