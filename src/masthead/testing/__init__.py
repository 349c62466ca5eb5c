"""Test utilities for masthead applications::

    from masthead.testing import TestClient
"""

from masthead.testing.client import TestClient

__all__ = ["TestClient"]
