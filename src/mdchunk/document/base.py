# document/base.py

from abc import ABC, abstractmethod

from .nodes import Root


class DocumentParser(ABC):
    @abstractmethod
    def parse(self, text: str) -> Root:
        """
        Parse markdown text and return an immutable document tree.

        Requirements:
        - Deterministic output for same input
        - Block nodes carry document-global offsets where known
        - Reference-style links and images are resolved to inline form
        """
        raise NotImplementedError
