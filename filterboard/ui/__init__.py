"""
Dash adapters: layout builders and callbacks around the core filter logic.
"""
