"""
Inventory model of a media changer: drives, storage slots, import/export (mailbox)
slots, and the volumes occupying them.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SlotKind(Enum):
    UNKNOWN = 0
    DRIVE = 1  # Data Transfer Element
    STORAGE = 2  # Storage Element
    MAILBOX = 3  # Storage Element IMPORT/EXPORT


@dataclass
class Volume:
    """A media cartridge. drive is "" unless the volume is mounted in a drive."""

    id: str
    home: str = ""
    drive: str = ""

    @property
    def in_drive(self) -> bool:
        return self.drive != ""


@dataclass
class Slot:
    """A drive or slot in the library; occupant is None when empty."""

    kind: SlotKind
    id: str
    occupant: Optional[Volume] = None

    @property
    def is_empty(self) -> bool:
        return self.occupant is None


@dataclass
class Inventory:
    """
    Snapshot of the library as reported by mtx status.
    Each map is keyed by element id. A volume is the occupant of exactly one slot:
    its drive while mounted, otherwise its home slot.
    """

    num_drives: int = 0
    num_storage_slots: int = 0
    num_mailbox_slots: int = 0
    drives: dict[str, Slot] = field(default_factory=dict)
    storage_slots: dict[str, Slot] = field(default_factory=dict)
    mailbox_slots: dict[str, Slot] = field(default_factory=dict)

    def all_slots(self) -> list[Slot]:
        return (
            list(self.drives.values())
            + list(self.storage_slots.values())
            + list(self.mailbox_slots.values())
        )

    def volumes(self) -> list[Volume]:
        """Every volume currently placed anywhere in the library."""
        return [s.occupant for s in self.all_slots() if s.occupant is not None]

    def home_map(self, slot_id: str) -> Optional[dict[str, Slot]]:
        """Return the storage or mailbox map holding slot_id (storage first), or None."""
        if slot_id in self.storage_slots:
            return self.storage_slots
        if slot_id in self.mailbox_slots:
            return self.mailbox_slots
        return None
