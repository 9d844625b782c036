"""
Application Layer

Orchestrates domain objects and infrastructure ports into player sessions.

Structure:
- interfaces/: Port interfaces for node, gateway and search adapters
- services/: Player, player manager and node selection
"""
