"""
Landlord property listing service.
"""

__version__ = "1.0.0"
