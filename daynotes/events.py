"""
Change notifications emitted by a vault.

Events are plain messages delivered after the change has taken effect
in the vault. Only leaf documents produce events, never directories.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class DocumentCreated:
    path: str


@dataclass(frozen=True)
class DocumentModified:
    path: str


@dataclass(frozen=True)
class DocumentDeleted:
    path: str


@dataclass(frozen=True)
class DocumentRenamed:
    old_path: str
    new_path: str


VaultEvent = Union[DocumentCreated, DocumentModified, DocumentDeleted, DocumentRenamed]
