"""
powerfour.interfaces - User interfaces for PowerFour

Only a terminal interface lives here; graphical front ends consume the
engine in powerfour.game directly.
"""

# Don't import anything here to avoid circular imports
__all__ = []
