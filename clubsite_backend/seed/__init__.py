# __init__.py
# Imports all seed functions for easy batch seeding.

from .seed_demo_club import seed_demo_club, seed_teams, seed_competitions, seed_friendly_matches
