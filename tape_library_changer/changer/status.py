"""
Parse `mtx status` output into an Inventory.

  Storage Changer /dev/sg3:2 Drives, 6 Slots ( 2 Import/Export )
Data Transfer Element 0:Full (Storage Element 1 Loaded):VolumeTag = M00001L6
Data Transfer Element 1:Empty
      Storage Element 1:Empty
      Storage Element 3:Full :VolumeTag=M00003L6
      Storage Element 5 IMPORT/EXPORT:Full :VolumeTag=M00002L6
      Storage Element 6 IMPORT/EXPORT:Empty
"""
import re
from typing import Callable, Optional

from .errors import MalformedReport
from .models import Inventory, Slot, SlotKind, Volume

_SUMMARY_RE = re.compile(
    r"\s*Storage Changer .*:(\d+) Drives, (\d+) Slots \( (\d+) Import/Export \)"
)

_SE_FULL_RE = re.compile(r"\s*Storage Element (\d+):Full :VolumeTag=(.*)")
_SE_EMPTY_RE = re.compile(r"\s*Storage Element (\d+):Empty")
_DTE_FULL_RE = re.compile(
    r"Data Transfer Element (\d+):Full \(Storage Element (\d+) Loaded\):VolumeTag = (.*)"
)
_DTE_EMPTY_RE = re.compile(r"Data Transfer Element (\d+):Empty")
_IE_EMPTY_RE = re.compile(r"\s*Storage Element (\d+) IMPORT/EXPORT:Empty")
_IE_FULL_RE = re.compile(r"\s*Storage Element (\d+) IMPORT/EXPORT:Full :VolumeTag=(.*)")


def _volume_tag(text: str) -> str:
    # mtx pads tags with trailing spaces; inner whitespace is part of the tag
    return text.strip()


def _storage_full(m: "re.Match[str]") -> Slot:
    vol = Volume(id=_volume_tag(m.group(2)), home=m.group(1))
    return Slot(SlotKind.STORAGE, m.group(1), vol)


def _storage_empty(m: "re.Match[str]") -> Slot:
    return Slot(SlotKind.STORAGE, m.group(1))


def _drive_full(m: "re.Match[str]") -> Slot:
    vol = Volume(id=_volume_tag(m.group(3)), home=m.group(2), drive=m.group(1))
    return Slot(SlotKind.DRIVE, m.group(1), vol)


def _drive_empty(m: "re.Match[str]") -> Slot:
    return Slot(SlotKind.DRIVE, m.group(1))


def _mailbox_empty(m: "re.Match[str]") -> Slot:
    return Slot(SlotKind.MAILBOX, m.group(1))


def _mailbox_full(m: "re.Match[str]") -> Slot:
    vol = Volume(id=_volume_tag(m.group(2)), home=m.group(1))
    return Slot(SlotKind.MAILBOX, m.group(1), vol)


# Tried in order; most frequent line kinds in a large library come first.
# Order matters: some patterns overlap on malformed lines.
_ELEMENT_MATCHERS: list[tuple["re.Pattern[str]", Callable[["re.Match[str]"], Slot]]] = [
    (_SE_FULL_RE, _storage_full),
    (_SE_EMPTY_RE, _storage_empty),
    (_DTE_FULL_RE, _drive_full),
    (_DTE_EMPTY_RE, _drive_empty),
    (_IE_EMPTY_RE, _mailbox_empty),
    (_IE_FULL_RE, _mailbox_full),
]


def parse_element_line(line: str) -> Optional[Slot]:
    """Classify one element line. Returns None for lines matching no known grammar."""
    for pattern, build in _ELEMENT_MATCHERS:
        match = pattern.search(line)
        if match:
            return build(match)
    return None


def parse_summary_line(line: str) -> tuple[int, int, int]:
    """
    Parse the first line of mtx status. Returns (drives, storage slots, mailbox slots);
    the reported slot total includes the mailbox slots. Raises MalformedReport.
    """
    match = _SUMMARY_RE.search(line)
    if not match:
        raise MalformedReport("no summary output found")
    # the pattern only captures digits
    drives, total_slots, mailboxes = (int(g) for g in match.groups())
    return drives, total_slots - mailboxes, mailboxes


def parse_status(text: str) -> Inventory:
    """
    Build an Inventory from the full text of mtx status.
    Raises MalformedReport if the first line is not a summary line; lines after it
    that match no element grammar are skipped.
    """
    lines = text.splitlines()
    if not lines:
        raise MalformedReport("empty status output")
    num_drives, num_slots, num_mailboxes = parse_summary_line(lines[0])

    inv = Inventory(
        num_drives=num_drives,
        num_storage_slots=num_slots,
        num_mailbox_slots=num_mailboxes,
    )
    targets = {
        SlotKind.DRIVE: inv.drives,
        SlotKind.STORAGE: inv.storage_slots,
        SlotKind.MAILBOX: inv.mailbox_slots,
    }
    for line in lines[1:]:
        slot = parse_element_line(line)
        if slot is not None:
            targets[slot.kind][slot.id] = slot
    return inv
