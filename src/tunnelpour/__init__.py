"""
Tunnelpour - concrete lining quantity tracking for tunnel construction.

This package provides the quantity-surveying engine used to reconcile
design, survey and poured concrete volumes along a tunnel alignment and
to forecast the quantity needed to complete the lining.
"""

__version__ = "0.1.0"
