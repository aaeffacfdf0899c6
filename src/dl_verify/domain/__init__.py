"""Domain types shared across dl-verify."""
