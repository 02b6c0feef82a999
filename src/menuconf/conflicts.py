"""
Identifier conflict resolution.

When an imported Item claims an id the caller already knows, a
ResolutionPolicy decides what happens:

    NO_IMPORT  the import is cancelled (ImportCancelledError)
    RENUMBER   the imported item gets a fresh, unused id and a marked label
    OVERRIDE   the item is kept as is; the caller replaces its own copy
    ASK        the caller's ask callback picks one of the three above

The caller's data is never touched here: existing items are only looked
up through the find_existing callback.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from .errors import ImportCancelledError, Message, MessageKind, ResolutionError
from .model import Item

logger = logging.getLogger(__name__)

FindExisting = Callable[[str], Optional[Item]]
AskCallback = Callable[[Item, Item], Optional["ResolutionPolicy"]]

RENUMBER_MARKER = "(renumbered)"

MSG_NO_CHECK_FUNCTION = "Item was renumbered because the caller did not provide any check function."
MSG_RENUMBERED = "Item was renumbered due to user request."
MSG_OVERRIDDEN = "Existing item was overridden due to user request."
MSG_CANCELLED = "Import was canceled due to user request."


class ResolutionPolicy(Enum):
    ASK = "Ask"
    RENUMBER = "Renumber"
    OVERRIDE = "Override"
    NO_IMPORT = "NoImport"

    @classmethod
    def from_id(cls, policy_id: str) -> "ResolutionPolicy":
        for policy in cls:
            if policy.value.lower() == policy_id.strip().lower():
                return policy
        raise ValueError(f"Unknown resolution policy: {policy_id}")

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    ResolutionPolicy.NO_IMPORT: "Do not import the item",
    ResolutionPolicy.RENUMBER: "Import the item, allocating it a new identifier",
    ResolutionPolicy.OVERRIDE: "Import the item, overriding the existing one",
    ResolutionPolicy.ASK: "Ask me",
}

CONCRETE_POLICIES = (
    ResolutionPolicy.RENUMBER,
    ResolutionPolicy.OVERRIDE,
    ResolutionPolicy.NO_IMPORT,
)


@dataclass
class Resolution:
    """
    Outcome of resolve().

    Properties:
        item: The (possibly renumbered) imported item
        existing: The caller's item holding the same id, if any
        mode: The policy actually applied, None when there was no conflict
        messages: Informational messages for the user
    """

    item: Item
    existing: Optional[Item] = None
    mode: Optional[ResolutionPolicy] = None
    messages: List[Message] = field(default_factory=list)


def new_item_id() -> str:
    return str(uuid.uuid4())


def renumber(item: Item, find_existing: Optional[FindExisting]) -> Item:
    """Give item a fresh id not known to find_existing, and mark its label."""
    new_id = new_item_id()
    while find_existing is not None and find_existing(new_id) is not None:
        new_id = new_item_id()
    logger.debug("renumbering %s to %s", item.id, new_id)
    item.id = new_id
    item.label = f"{item.label} {RENUMBER_MARKER}" if item.label else RENUMBER_MARKER
    return item


def resolve(item: Item, find_existing: Optional[FindExisting],
            policy: ResolutionPolicy, ask: Optional[AskCallback] = None) -> Resolution:
    """
    Apply policy to a freshly imported item.

    Raises:
        ImportCancelledError: the policy, or the user, declined the import
        ResolutionError: ASK without an ask callback, or an invalid answer
    """
    if find_existing is None:
        renumber(item, None)
        return Resolution(
            item=item,
            mode=ResolutionPolicy.RENUMBER,
            messages=[Message(MessageKind.INFO, MSG_NO_CHECK_FUNCTION)],
        )

    existing = find_existing(item.id)
    if existing is None:
        return Resolution(item=item)

    mode = policy
    asked = False
    if mode == ResolutionPolicy.ASK:
        if ask is None:
            raise ResolutionError("the Ask policy requires an ask callback")
        mode = ask(item, existing)
        asked = True
        if mode is None:
            mode = ResolutionPolicy.NO_IMPORT
        if mode not in CONCRETE_POLICIES:
            raise ResolutionError(f"ask callback returned an invalid policy: {mode!r}")

    logger.info("item %s already exists, applying %s", item.id, mode.value)

    if mode == ResolutionPolicy.NO_IMPORT:
        reason = MSG_CANCELLED if asked else f"Item {item.id} already exists."
        raise ImportCancelledError(item.id, reason)

    if mode == ResolutionPolicy.RENUMBER:
        renumber(item, find_existing)
        text = MSG_RENUMBERED
    else:
        text = MSG_OVERRIDDEN

    return Resolution(
        item=item,
        existing=existing,
        mode=mode,
        messages=[Message(MessageKind.INFO, text)],
    )


__all__ = [
    "FindExisting",
    "AskCallback",
    "RENUMBER_MARKER",
    "ResolutionPolicy",
    "CONCRETE_POLICIES",
    "Resolution",
    "new_item_id",
    "renumber",
    "resolve",
]
