"""Tests for layered system prompt assembly."""
from datetime import date

import pytest

from docforge.core.config import DEFAULT_SEPARATOR
from docforge.core.context import ContextBundle, Workspace
from docforge.core.exceptions import CapabilityEnumerationError, RequiredLayerError
from docforge.prompts import PromptAssembler, PromptComposer, ScenarioRegistry
from docforge.prompts.scenarios import LayerSource, Scenario

from conftest import MockCapabilitySource


@pytest.fixture
def composer():
    return PromptComposer()


@pytest.fixture
def assembler(composer):
    return PromptAssembler.from_composer(composer)


@pytest.fixture
def scenarios():
    return ScenarioRegistry()


def scenario_of(*layers, **kwargs) -> Scenario:
    return Scenario.from_dict({"id": "test", "layers": list(layers), **kwargs})


# =============================================================================
# Ordering and Joining Tests
# =============================================================================

def test_objective_document_full(assembler, scenarios, full_bundle):
    sections = assembler.generate_sections(scenarios.get("objective-document"), full_bundle)

    assert [s.source for s in sections] == [
        LayerSource.CORE,
        LayerSource.CURRENT_CONTEXT,
        LayerSource.STREAMING,
        LayerSource.DOMAIN,
        LayerSource.ARTIFACT_TYPE,
        LayerSource.TEMPLATE,
        LayerSource.WORKSPACE_CONTEXT,
        LayerSource.OBJECTIVE_CONTEXT,
    ]


def test_generate_joins_with_separator(assembler, scenarios, full_bundle):
    scenario = scenarios.get("objective-document")

    prompt = assembler.generate(scenario, full_bundle)
    sections = assembler.generate_sections(scenario, full_bundle)

    assert prompt == DEFAULT_SEPARATOR.join(s.content for s in sections)
    assert prompt.count(DEFAULT_SEPARATOR) == len(sections) - 1


def test_custom_separator(composer, full_bundle):
    assembler = PromptAssembler.from_composer(composer, separator="\n\n")
    scenario = scenario_of({"source": "domain"}, {"source": "artifactType"})

    assert assembler.generate(scenario, full_bundle) == (
        "You are a sales strategy expert.\n\nWrite a sales strategy document."
    )


def test_chat_message_minimal(assembler, scenarios, bundle):
    """Optional layers with nothing to say leave no trace."""
    sections = assembler.generate_sections(scenarios.get("chat-message"), bundle)

    assert [s.source for s in sections] == [
        LayerSource.CORE,
        LayerSource.CURRENT_CONTEXT,
        LayerSource.DOMAIN,
        LayerSource.STREAMING,
    ]


def test_chat_message_with_capabilities(assembler, scenarios, full_bundle):
    prompt = assembler.generate(scenarios.get("chat-message"), full_bundle)

    streaming_at = prompt.index("## Working as a Streaming Agent")
    capabilities_at = prompt.index("## My Core Capabilities")
    workspace_at = prompt.index("## Workspace Context")
    assert streaming_at < capabilities_at < workspace_at


def test_sections_carry_layer_metadata(assembler, scenarios, full_bundle):
    sections = assembler.generate_sections(scenarios.get("objective-document"), full_bundle)
    domain = next(s for s in sections if s.source == LayerSource.DOMAIN)

    assert domain.label == "Domain Intelligence"
    assert domain.editable is True
    assert domain.db_field == "Domain.system_prompt"


def test_deterministic(assembler, scenarios, full_bundle):
    scenario = scenarios.get("objective-document")

    assert assembler.generate(scenario, full_bundle) == assembler.generate(scenario, full_bundle)


# =============================================================================
# Required and Optional Layer Tests
# =============================================================================

def test_missing_domain_precondition(assembler, scenarios):
    bundle = ContextBundle(current_date=date(2025, 3, 1))

    with pytest.raises(RequiredLayerError) as exc_info:
        assembler.generate(scenarios.get("chat-message"), bundle)

    assert exc_info.value.scenario_id == "chat-message"
    assert exc_info.value.source == "domain"


def test_missing_artifact_type_precondition(assembler, scenarios, bundle):
    with pytest.raises(RequiredLayerError) as exc_info:
        assembler.generate(scenarios.get("knowledge-summary"), bundle)

    assert exc_info.value.source == "artifactType"


def test_empty_required_layer_raises(assembler, bundle):
    scenario = scenario_of({"source": "core"}, {"source": "workspaceContext", "required": True})

    with pytest.raises(RequiredLayerError) as exc_info:
        assembler.generate(scenario, bundle)

    assert exc_info.value.source == "workspaceContext"
    assert exc_info.value.scenario_id == "test"


def test_whitespace_optional_layer_skipped(assembler, sales_domain):
    bundle = ContextBundle(
        current_date=date(2025, 3, 1),
        domain=sales_domain,
        workspace=Workspace(id="ws-1", name="Acme", context="   \n"),
    )
    scenario = scenario_of({"source": "domain"}, {"source": "workspaceContext", "required": False})

    sections = assembler.generate_sections(scenario, bundle)

    assert [s.source for s in sections] == [LayerSource.DOMAIN]


def test_capability_failure_does_not_fail_prompt(assembler, scenarios, sales_domain):
    bundle = ContextBundle(
        current_date=date(2025, 3, 1),
        domain=sales_domain,
        capability_source=MockCapabilitySource(error=CapabilityEnumerationError("db down")),
    )

    sections = assembler.generate_sections(scenarios.get("chat-message"), bundle)

    assert LayerSource.CAPABILITIES not in [s.source for s in sections]


# =============================================================================
# Lazy Loading Tests
# =============================================================================

def test_loaders_run_once(assembler, scenarios, sales_domain, strategy_artifact):
    calls = {"domain": 0, "artifact": 0}

    def load_domain():
        calls["domain"] += 1
        return sales_domain

    def load_artifact():
        calls["artifact"] += 1
        return strategy_artifact

    bundle = ContextBundle(
        current_date=date(2025, 3, 1),
        domain=load_domain,
        artifact_type=load_artifact,
    )

    assembler.generate(scenarios.get("objective-document"), bundle)

    assert calls == {"domain": 1, "artifact": 1}


def test_unused_loaders_never_run(assembler, scenarios, bundle):
    """chat-message has no artifact layers; its loader is not touched."""
    def load_artifact():
        raise AssertionError("artifact type should not be loaded")

    lazy = ContextBundle(
        current_date=bundle.current_date,
        domain=bundle.domain,
        artifact_type=load_artifact,
    )

    assembler.generate(scenarios.get("chat-message"), lazy)
