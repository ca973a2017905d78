"""Capability source backed by capabilities.yaml."""
import logging
from typing import Any, Dict, List, Optional

from ...config import load_capabilities_config
from ...core.context import Capability
from ...core.exceptions import CapabilityEnumerationError

logger = logging.getLogger(__name__)


class YamlCapabilitySource:
    """
    Lists document capabilities per domain from a YAML mapping.

    Expected shape:
        domains:
          sales:
            - name: Sales Strategy
              description: ...
              requires_source_documents: false
              use_when: ...
              trigger_keywords: [...]

    Entries are parsed on first use per domain and cached.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        """
        Args:
            data: Parsed capabilities mapping. Defaults to the packaged file.
        """
        self._data = data if data is not None else load_capabilities_config()
        self._cache: Dict[str, List[Capability]] = {}

    def list_capabilities(self, domain_id: str) -> List[Capability]:
        """
        List capabilities registered for a domain.

        Returns:
            Capabilities in file order; empty for unknown domains.

        Raises:
            CapabilityEnumerationError: If the domain's entries are malformed.
        """
        if domain_id in self._cache:
            return list(self._cache[domain_id])

        domains = self._data.get("domains") or {}
        entries = domains.get(domain_id) or []
        try:
            capabilities = [Capability.from_dict(entry) for entry in entries]
        except (KeyError, TypeError, AttributeError) as e:
            raise CapabilityEnumerationError(
                f"Malformed capability entry for domain '{domain_id}': {e}"
            ) from e

        self._cache[domain_id] = capabilities
        logger.debug(f"Loaded {len(capabilities)} capabilities for domain '{domain_id}'")
        return list(capabilities)
