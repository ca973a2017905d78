"""Plugins for docforge (auto-discovered by PluginRegistry)."""
