"""Infrastructure Layer — IO adapters: database, logging, tokens, files, notifications.

Invariants:
    - Infrastructure errors are mapped to TrialEngageError subclasses before leaving this layer
"""
