"""Custom exception hierarchy for the calendar heatmap."""


class HeatmapError(Exception):
    """Base exception for all calendar heatmap errors."""


# --- Configuration ---
class ConfigurationError(HeatmapError):
    """Invalid calendar configuration (units, layout limits, date bounds)."""


# --- Data ---
class DataMismatchError(HeatmapError):
    """Domain data that does not belong to the collection it is merged into."""
