"""
Driller Package
===============

This package contains the core simulation of the Driller digging game and
the wrappers that expose it to agents and human players:

- Grid model, connectivity labeling and support propagation
- Per-cell gravity with shake/fall phases and cascading erasure
- Player state machine, digging and the air resource
- Gymnasium environment and numpy renderer

All tunable parameters are in game_config.yaml.
"""
