"""
envfleet - multi-environment project management on top of a PaaS.

A project is one app per deployment environment (dev, qa, stage, prod...),
created, updated and removed as a single logical operation.
"""

__version__ = "0.3.0"
