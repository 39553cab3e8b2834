from .errors import (
    ChangerError,
    OperationError,
    MalformedReport,
    NotFound,
    DriveNotAvailable,
    SlotNotAvailable,
    VolumeAlreadyInDrive,
    VolumeNotInDrive,
    NoHomeSlot,
    NoCleaningMediaAvailable,
    ExternalCommandFailed,
)
from .models import SlotKind, Volume, Slot, Inventory
from .status import parse_status
from .mtx import run_mtx, CommandExecutor
from .lookup import (
    get_drive_by_id,
    get_slot_by_id,
    get_mailbox_by_id,
    get_empty_drives,
    find_cleaning_media,
    find_home_slot,
    find_home_id,
    element_sort_key,
)
from .library import Library

__all__ = [
    "ChangerError",
    "OperationError",
    "MalformedReport",
    "NotFound",
    "DriveNotAvailable",
    "SlotNotAvailable",
    "VolumeAlreadyInDrive",
    "VolumeNotInDrive",
    "NoHomeSlot",
    "NoCleaningMediaAvailable",
    "ExternalCommandFailed",
    "SlotKind",
    "Volume",
    "Slot",
    "Inventory",
    "parse_status",
    "run_mtx",
    "CommandExecutor",
    "get_drive_by_id",
    "get_slot_by_id",
    "get_mailbox_by_id",
    "get_empty_drives",
    "find_cleaning_media",
    "find_home_slot",
    "find_home_id",
    "element_sort_key",
    "Library",
]
