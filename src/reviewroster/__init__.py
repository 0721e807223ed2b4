"""ReviewRoster - Pull request reviewer assignment service.

This package tracks teams, users and pull requests, and automates reviewer
selection, reviewer swaps and reviewer re-balancing when team members are
deactivated.
"""

__version__ = "0.1.0"
