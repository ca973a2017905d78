"""docforge - agent step orchestrator and layered prompt assembler."""

__version__ = "0.1.0"
