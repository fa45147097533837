"""Manifold - editable project synthesis for declarative project manifests."""

__version__ = "0.4.0"
