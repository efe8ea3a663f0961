"""Routing — from a request path to a resolved action.

Candidate action names come from the path itself (``/foo/bar`` tries
``foo__bar``, then ``foo("bar")``, then ``index("foo", "bar")``); the
node's method table decides which candidate a method can take.
"""
