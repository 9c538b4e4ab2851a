"""
Version 1 of the API.

Bundles the ``/user`` and ``/messaging`` endpoints.  Breaking changes
belong in a new version subpackage.
"""
