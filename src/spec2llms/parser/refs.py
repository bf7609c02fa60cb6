"""Local ``$ref`` resolution for OpenAPI documents."""

import logging

logger = logging.getLogger(__name__)


class RefResolver:
    """Resolves ``#/...`` JSON pointers against a loaded OpenAPI document.

    Only references local to the document are supported. External or broken
    references resolve to ``None`` and are logged once.
    """

    def __init__(self, document: dict):
        self.document = document
        self._reported: set[str] = set()

    def lookup(self, ref: str):
        """Return the node ``ref`` points to, or ``None`` if it cannot be found."""
        if not ref.startswith("#/"):
            self._report(ref, "external references are not supported")
            return None

        node = self.document
        for token in ref[2:].split("/"):
            token = token.replace("~1", "/").replace("~0", "~")
            if isinstance(node, dict) and token in node:
                node = node[token]
            elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
                node = node[int(token)]
            else:
                self._report(ref, "target not found")
                return None
        return node

    def deref(self, node):
        """Follow a chain of ``$ref`` objects until a concrete node is reached.

        Returns ``None`` for a broken or cyclic chain.
        """
        seen: set[str] = set()
        while isinstance(node, dict) and "$ref" in node:
            ref = node["$ref"]
            if ref in seen:
                self._report(ref, "reference cycle")
                return None
            seen.add(ref)
            node = self.lookup(ref)
        return node

    def _report(self, ref: str, reason: str) -> None:
        if ref in self._reported:
            return
        self._reported.add(ref)
        logger.warning("Unresolved reference %s: %s", ref, reason)
