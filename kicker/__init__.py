"""
Kicker: periodically kicks long-lived pods according to named policies.

Core pieces:
- predicates / pipeline: compose filters, ordering and cutoffs
- throttles: cool down and spread timers carried between cycles
- registry / strategy: named policies bound to per-criteria state
- engine: the fetch, evaluate, kick, sleep loop
"""

__version__ = "0.1.0"
