"""Fantasy cricket player valuation and catalog tooling."""

__version__ = "0.1.0"
