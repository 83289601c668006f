"""Domain services: access control, ordering, moves, membership and read models."""
