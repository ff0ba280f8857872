"""
choreo package
==============

Displacement choreography engine: aggregates IDMC disaster displacement
events into countries, regions and subregions, derives a logarithmic
movement score per place, and navigates it year by year.

- The CLI entry point is in `choreo/cli.py`.
- The session facade is in `choreo/engine.py`.
- Dataset loading is in `choreo/loader.py`.
"""

__version__ = '0.1.0'
