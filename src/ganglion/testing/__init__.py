"""Test utilities for ganglion applications::

    from ganglion.testing import TestClient
"""

from ganglion.testing.client import TestClient, http_scope

__all__ = ["TestClient", "http_scope"]
