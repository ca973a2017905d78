"""Capability sources for docforge."""
from .yaml_source import YamlCapabilitySource

__all__ = ["YamlCapabilitySource"]
