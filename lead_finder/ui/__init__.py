"""Desktop user interface and map rendering for the lead finder.

The Tk application lives in :mod:`lead_finder.ui.app` and is imported on
demand so that map rendering works on machines without Tk.
"""

__all__ = ["app", "map_view"]
