"""Prompt Registry for docforge.

File loader with per-domain fallback for loading prompt templates.
"""
import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class PromptRegistry:
    """Registry for loading prompt files with domain fallback.

    Prompts are loaded from the prompts/ directory with the following lookup order:
    1. prompts/{category}/variants/{domain}/{name}.prompt (if domain specified)
    2. prompts/{category}/{name}.prompt (fallback/default)

    Example:
        registry = PromptRegistry()
        prompt = registry.get_prompt("modes", "discovery", domain="sales")
    """

    def __init__(self, prompts_dir: Optional[Path] = None):
        """Initialize the prompt registry.

        Args:
            prompts_dir: Path to prompts directory. Defaults to docforge/prompts/.
        """
        if prompts_dir is None:
            prompts_dir = Path(__file__).parent

        self._prompts_dir = Path(prompts_dir)
        self._cache: Dict[str, str] = {}

        logger.debug(f"PromptRegistry initialized with prompts_dir: {prompts_dir}")

    def get_prompt(
        self,
        category: str,
        name: str,
        domain: Optional[str] = None,
    ) -> str:
        """Load prompt with domain fallback.

        Args:
            category: Prompt category ('system', 'modes', 'layers')
            name: Prompt name without extension
            domain: Optional domain id ('sales', 'requirements')

        Returns:
            Prompt content as string.

        Raises:
            FileNotFoundError: If prompt not found in any location.
        """
        if domain:
            cache_key = f"{category}/variants/{domain}/{name}"
            if cache_key in self._cache:
                return self._cache[cache_key]

            variant_path = self._prompts_dir / category / "variants" / domain / f"{name}.prompt"
            if variant_path.exists():
                content = variant_path.read_text()
                self._cache[cache_key] = content
                logger.debug(f"Loaded prompt variant: {cache_key}")
                return content

        cache_key = f"{category}/{name}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        default_path = self._prompts_dir / category / f"{name}.prompt"
        if default_path.exists():
            content = default_path.read_text()
            self._cache[cache_key] = content
            logger.debug(f"Loaded prompt: {cache_key}")
            return content

        raise FileNotFoundError(
            f"Prompt not found: category='{category}', name='{name}', "
            f"domain='{domain}'. Searched: {default_path}"
        )


# Shared instance for the packaged prompts
prompt_registry = PromptRegistry()
