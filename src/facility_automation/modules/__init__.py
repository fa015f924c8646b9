"""
Modules package for facility-automation.

Modules add behavior on top of the room catalog:
- occupancy: state owner and automation policy
- notifications: snapshot fan-out
- shutdown: daily auto-shutdown
- sensors: simulated occupancy input
"""
