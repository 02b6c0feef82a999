"""
Import entry points.

    import_item(source, find_existing, policy, ask)
        read one document (bytes, XML text, path or file:// URI), then
        resolve a possible id conflict against the caller's data

    Importer(settings, find_existing, ask).import_many(sources)
        batch import; ids are also checked against the items imported
        earlier in the same batch, and per-source failures are recorded
        instead of aborting the batch
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union
from urllib.parse import unquote, urlparse

from .config import Settings
from .conflicts import AskCallback, FindExisting, ResolutionPolicy, resolve
from .dialects import Dialect
from .errors import ItemImportError, Message, ResolutionError
from .model import Item
from .reader import ItemReader

logger = logging.getLogger(__name__)

Source = Union[bytes, str, os.PathLike]


@dataclass
class ImportResult:
    """
    A successfully imported item.

    Properties:
        item: The populated Item (renumbered if the policy said so)
        dialect: The dialect the document was written in
        messages: Reader diagnostics, then conflict resolution messages
        mode: Resolution policy applied, None when the id was free
        exists: Whether an item with the imported id was already known
        source: Name of the source, for display
    """

    item: Item
    dialect: Dialect
    messages: List[Message] = field(default_factory=list)
    mode: Optional[ResolutionPolicy] = None
    exists: bool = False
    source: str = "<buffer>"


def _import_data(data: Union[bytes, str], source_name: str,
                 find_existing: Optional[FindExisting], policy: ResolutionPolicy,
                 ask: Optional[AskCallback]) -> ImportResult:
    read = ItemReader(source_name).read(data)
    resolution = resolve(read.item, find_existing, policy, ask)
    logger.info("%s: %s %s imported", source_name, read.item.type_name, read.item.id)
    return ImportResult(
        item=resolution.item,
        dialect=read.dialect,
        messages=read.messages + resolution.messages,
        mode=resolution.mode,
        exists=resolution.existing is not None,
        source=source_name,
    )


def import_from_buffer(data: Union[bytes, str],
                       find_existing: Optional[FindExisting] = None,
                       policy: ResolutionPolicy = ResolutionPolicy.NO_IMPORT,
                       ask: Optional[AskCallback] = None,
                       source_name: str = "<buffer>") -> ImportResult:
    """Import a document held in memory (bytes, or XML text)."""
    return _import_data(data, source_name, find_existing, policy, ask)


def _source_path(source: Union[str, os.PathLike]) -> Path:
    text = os.fspath(source)
    if text.startswith("file://"):
        return Path(unquote(urlparse(text).path))
    return Path(text)


def import_from_file(source: Union[str, os.PathLike],
                     find_existing: Optional[FindExisting] = None,
                     policy: ResolutionPolicy = ResolutionPolicy.NO_IMPORT,
                     ask: Optional[AskCallback] = None) -> ImportResult:
    """Import a document from a path or a file:// URI."""
    path = _source_path(source)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ItemImportError(f"{path}: {exc.strerror or exc}") from exc
    return _import_data(data, str(path), find_existing, policy, ask)


def import_item(source: Source,
                find_existing: Optional[FindExisting] = None,
                policy: ResolutionPolicy = ResolutionPolicy.NO_IMPORT,
                ask: Optional[AskCallback] = None) -> ImportResult:
    """
    Import one item.

    Args:
        source: bytes are a document; a str is XML text if it starts
            with '<', else a path or file:// URI; path-like objects are paths
        find_existing: Returns the caller's item with a given id, if any.
            Without it the imported item is always renumbered.
        policy: What to do when the id already exists
        ask: Called once, with (imported, existing), under the ASK policy

    Raises:
        UnsupportedDialectError, MalformedXmlError, MissingIdError,
        InvalidIdError, UnknownItemTypeError, ImportCancelledError
    """
    if isinstance(source, bytes):
        return import_from_buffer(source, find_existing, policy, ask)
    if isinstance(source, str) and source.lstrip().startswith("<"):
        return import_from_buffer(source, find_existing, policy, ask)
    return import_from_file(source, find_existing, policy, ask)


@dataclass
class BatchEntry:
    source: str
    result: Optional[ImportResult] = None
    error: Optional[ItemImportError] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


class Importer:
    """
    Imports several sources with shared settings.

    Properties:
        settings: import_mode and import_keep_choice are used
        find_existing: Lookup in the caller's data
        ask: Callback used under the ASK policy
    """

    def __init__(self, settings: Optional[Settings] = None,
                 find_existing: Optional[FindExisting] = None,
                 ask: Optional[AskCallback] = None):
        self.settings = settings or Settings()
        self.find_existing = find_existing
        self.ask = ask
        self._imported: List[Item] = []
        self._last_choice: Optional[ResolutionPolicy] = None

    def _find(self, item_id: str) -> Optional[Item]:
        for item in self._imported:
            if item.id == item_id:
                return item
        if self.find_existing is not None:
            return self.find_existing(item_id)
        return None

    def _ask(self, imported: Item, existing: Item) -> Optional[ResolutionPolicy]:
        if self.settings.import_keep_choice and self._last_choice is not None:
            return self._last_choice
        if self.ask is None:
            raise ResolutionError("the Ask policy requires an ask callback")
        self._last_choice = self.ask(imported, existing)
        return self._last_choice

    def import_one(self, source: Source) -> ImportResult:
        result = import_item(source, self._find, self.settings.import_mode, self._ask)
        self._imported.append(result.item)
        return result

    def import_many(self, sources: Iterable[Source]) -> List[BatchEntry]:
        entries = []
        for source in sources:
            name = "<buffer>" if isinstance(source, bytes) else str(source)[:80]
            try:
                entries.append(BatchEntry(source=name, result=self.import_one(source)))
            except ItemImportError as exc:
                logger.warning("%s: %s", name, exc)
                entries.append(BatchEntry(source=name, error=exc))
        imported = sum(1 for entry in entries if entry.ok)
        logger.info("batch import: %d imported, %d failed", imported, len(entries) - imported)
        return entries


__all__ = [
    "ImportResult",
    "import_from_buffer",
    "import_from_file",
    "import_item",
    "BatchEntry",
    "Importer",
]
