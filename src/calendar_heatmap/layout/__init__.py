"""Grid layout of subdomain cells inside domains.

Modules:
    templates.py  Per-subdomain geometry (rows, columns, positions)
    skeleton.py   DomainSkeleton: validated unit pair + its template
"""

from calendar_heatmap.layout.skeleton import DomainSkeleton

__all__ = ["DomainSkeleton"]
