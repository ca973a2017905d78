"""Prompt system for docforge.

This module provides:
- PromptRegistry: File loader with per-domain fallback
- PromptComposer: Per-mode prompt composition
- ScenarioRegistry: Ordered layer lists per use case
- PromptAssembler: Deterministic layered system prompt assembly

Directory structure:
    prompts/
    ├── system/              # Core and streaming prompts
    ├── modes/               # One prompt per ChatMode
    ├── layers/              # Reusable sections (completion status)
    └── {category}/variants/{domain}/   # Optional per-domain overrides

Usage:
    from docforge.prompts import ScenarioRegistry, PromptAssembler, PromptComposer

    assembler = PromptAssembler.from_composer(PromptComposer())
    prompt = assembler.generate(ScenarioRegistry().get("chat-message"), bundle)
"""
from .registry import PromptRegistry, prompt_registry
from .composer import PromptComposer, create_prompt_composer
from .scenarios import LayerConfig, LayerSource, Scenario, ScenarioRegistry
from .layers import LayerResolver, render_capabilities
from .assembler import AssembledLayer, PromptAssembler

__all__ = [
    "PromptRegistry",
    "prompt_registry",
    "PromptComposer",
    "create_prompt_composer",
    "LayerConfig",
    "LayerSource",
    "Scenario",
    "ScenarioRegistry",
    "LayerResolver",
    "render_capabilities",
    "AssembledLayer",
    "PromptAssembler",
]
