"""Change preview diffing."""

from dnsadmin.core.compare.differ import DiffGenerator, generate_diff

__all__ = ["DiffGenerator", "generate_diff"]
