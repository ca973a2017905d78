"""Tests for prompt file loading with domain variants."""
import pytest

from docforge.prompts import PromptRegistry


@pytest.fixture
def prompts_dir(tmp_path):
    (tmp_path / "system" / "variants" / "sales").mkdir(parents=True)
    (tmp_path / "system" / "core.prompt").write_text("default core")
    (tmp_path / "system" / "streaming.prompt").write_text("default streaming")
    (tmp_path / "system" / "variants" / "sales" / "core.prompt").write_text("sales core")
    return tmp_path


def test_default_prompt(prompts_dir):
    registry = PromptRegistry(prompts_dir)

    assert registry.get_prompt("system", "core") == "default core"


def test_variant_preferred(prompts_dir):
    registry = PromptRegistry(prompts_dir)

    assert registry.get_prompt("system", "core", domain="sales") == "sales core"
    assert registry.get_prompt("system", "streaming", domain="sales") == "default streaming"


def test_missing_prompt_raises(prompts_dir):
    with pytest.raises(FileNotFoundError):
        PromptRegistry(prompts_dir).get_prompt("modes", "review")


def test_prompt_cached_after_first_load(prompts_dir):
    registry = PromptRegistry(prompts_dir)
    registry.get_prompt("system", "core", domain="sales")

    (prompts_dir / "system" / "variants" / "sales" / "core.prompt").write_text("edited")

    assert registry.get_prompt("system", "core", domain="sales") == "sales core"


def test_unknown_domain_falls_back(prompts_dir):
    registry = PromptRegistry(prompts_dir)

    assert registry.get_prompt("system", "core", domain="legal") == "default core"


@pytest.mark.parametrize("category,name", [
    ("modes", "build"),
    ("modes", "discovery"),
    ("system", "core"),
    ("system", "streaming"),
    ("layers", "completion"),
])
def test_packaged_prompts(category, name):
    assert PromptRegistry().get_prompt(category, name).strip()
