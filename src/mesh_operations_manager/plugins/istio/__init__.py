"""Istio plugin: control plane revision tag commands."""

from mesh_operations_manager.plugins.istio.plugin import IstioPlugin

__all__ = ["IstioPlugin"]
