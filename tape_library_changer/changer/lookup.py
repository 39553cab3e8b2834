"""
Read-only queries over an Inventory snapshot.
"""
from ..config import CLEANING_PREFIX
from .errors import NotFound
from .models import Inventory, Slot, Volume


def _get(slots: dict[str, Slot], slot_id: str, what: str) -> Slot:
    try:
        return slots[slot_id]
    except KeyError:
        raise NotFound(f"no {what} found for id {slot_id}") from None


def get_drive_by_id(slot_id: str, inv: Inventory) -> Slot:
    """Return the drive slot with the given id. Raises NotFound."""
    return _get(inv.drives, slot_id, "drive")


def get_slot_by_id(slot_id: str, inv: Inventory) -> Slot:
    """Return the storage slot with the given id. Raises NotFound."""
    return _get(inv.storage_slots, slot_id, "storage slot")


def get_mailbox_by_id(slot_id: str, inv: Inventory) -> Slot:
    """Return the import/export slot with the given id. Raises NotFound."""
    return _get(inv.mailbox_slots, slot_id, "mailbox slot")


def get_empty_drives(inv: Inventory) -> list[str]:
    """Ids of drives with no volume loaded, in no particular order."""
    return [s.id for s in inv.drives.values() if s.occupant is None]


def is_cleaning_volume(vol: Volume) -> bool:
    return vol.id.startswith(CLEANING_PREFIX)


def find_cleaning_media(inv: Inventory) -> list[Volume]:
    """
    Cleaning volumes sitting in storage or mailbox slots. Cleaning volumes already
    mounted in a drive are not returned.
    """
    result = []
    for slots in (inv.storage_slots, inv.mailbox_slots):
        for s in slots.values():
            vol = s.occupant
            if vol is not None and not vol.in_drive and is_cleaning_volume(vol):
                result.append(vol)
    return result


def find_home_slot(vol: Volume, inv: Inventory) -> Slot:
    """Return the volume's home slot, storage slots first, then mailboxes. Raises NotFound."""
    if vol.home in inv.storage_slots:
        return inv.storage_slots[vol.home]
    if vol.home in inv.mailbox_slots:
        return inv.mailbox_slots[vol.home]
    raise NotFound(f"no home slot found for volume {vol.id}")


def find_home_id(vol: Volume) -> str:
    return vol.home


def element_sort_key(slot_id: str) -> tuple[int, int, str]:
    """Sort key for element ids: numeric ids in numeric order, anything else after them."""
    if slot_id.isdigit():
        return (0, int(slot_id), "")
    return (1, 0, slot_id)
