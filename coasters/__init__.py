"""
Coaster fleet monitor

Capacity planning and live monitoring for a park of independently configured
coasters:
1. Capacity model turning a coaster and its wagon fleet into a staffing diagnosis
2. Valkey-backed coaster registry with a change counter
3. Polling monitor that re-renders every coaster whenever the counter moves
"""

__version__ = "0.1.0"
