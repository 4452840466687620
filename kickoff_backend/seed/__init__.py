# __init__.py
# Imports all seed functions for easy batch seeding.

from .seed_teams import seed_teams
from .seed_matches import seed_matches
from .seed_all import seed_all
