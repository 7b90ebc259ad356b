"""
Accumulator and result models for one preprocessing run.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ParseContext(BaseModel):
    """
    Mutable state shared by every file reached from one entry script.

    A fresh context is created per entry script; sharing one between entry
    scripts would make files needed by the second look already loaded.
    """
    namespaces: List[str] = Field(default_factory=list)
    references: List[str] = Field(default_factory=list)
    loaded_scripts: List[str] = Field(default_factory=list)
    missing_scripts: List[str] = Field(default_factory=list)
    body_lines: List[str] = Field(default_factory=list)

    def add_namespace(self, namespace):
        if namespace and namespace not in self.namespaces:
            self.namespaces.append(namespace)

    def add_reference(self, reference):
        if reference and reference.strip() and reference not in self.references:
            self.references.append(reference)

    def is_loaded(self, path):
        return path in self.loaded_scripts

    def mark_loaded(self, path):
        """Record a script as visited. Returns False if it already was."""
        if path in self.loaded_scripts:
            return False
        self.loaded_scripts.append(path)
        return True

    def add_missing(self, path):
        if path not in self.missing_scripts:
            self.missing_scripts.append(path)


class PreprocessResult(BaseModel):
    """Merged code plus the metadata collected while producing it."""
    model_config = ConfigDict(frozen=True)

    code: str
    namespaces: List[str] = Field(default_factory=list)
    references: List[str] = Field(default_factory=list)
    loaded_scripts: List[str] = Field(default_factory=list)
    missing_scripts: List[str] = Field(default_factory=list)

    @classmethod
    def from_context(cls, context, code):
        return cls(
            code=code,
            namespaces=list(context.namespaces),
            references=list(context.references),
            loaded_scripts=list(context.loaded_scripts),
            missing_scripts=list(context.missing_scripts),
        )
