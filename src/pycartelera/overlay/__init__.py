"""Local overlay layer.

This package is the single place where local mutations (overrides, adds,
tombstones) are persisted and merged with whatever the remote catalog
returns. Merges happen at read time; nothing here talks to the network.
"""
