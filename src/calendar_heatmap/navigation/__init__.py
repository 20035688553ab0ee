"""Navigation layer: the live domain window and how it moves.

Modules:
    domain_collection.py  Sorted window of materialized domains
    navigator.py          Scroll / jump state machine with boundary events
    populator.py          Writes data values into window cells
"""

from calendar_heatmap.navigation.domain_collection import DomainCollection
from calendar_heatmap.navigation.navigator import Navigator
from calendar_heatmap.navigation.populator import Populator

__all__ = ["DomainCollection", "Navigator", "Populator"]
