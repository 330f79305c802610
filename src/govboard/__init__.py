"""govboard - status normalization, board projection and analytics for ticket governance."""

__version__ = "0.1.0"
