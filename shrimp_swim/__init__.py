"""
Shrimp Swim Package
===================

A side-scrolling swimming game: tap to kick the shrimp upward, slip
through the gaps between coral pillars, and score one point per pillar
passed.

All tunable parameters are in game_config.yaml.
"""
