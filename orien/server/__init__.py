"""HTTP surface for Orien."""

from orien.server.app import OrienServer

__all__ = ["OrienServer"]
