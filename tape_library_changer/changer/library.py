"""
Library: one SCSI media changer driven through mtx, with an in-memory inventory
kept in step with each successful move.

All operations on a Library hold its lock for their whole duration, including the
mtx call. The changer can only do one thing at a time, so callers simply queue on
the lock while the robot moves.
"""
import copy
import random
import threading
from typing import Callable, Optional, Union

from ..config import MTX_COMMAND
from .errors import (
    DriveNotAvailable,
    ExternalCommandFailed,
    MalformedReport,
    NoCleaningMediaAvailable,
    NoHomeSlot,
    SlotNotAvailable,
    VolumeAlreadyInDrive,
    VolumeNotInDrive,
)
from .lookup import element_sort_key, find_cleaning_media, get_empty_drives
from .models import Inventory, Slot, SlotKind, Volume
from .mtx import CommandExecutor, run_mtx
from .status import parse_status

SlotRef = Union[Slot, str]


def _slot_id(ref: SlotRef) -> str:
    return ref.id if isinstance(ref, Slot) else str(ref)


class Library:
    """
    A media changer at `device`, controlled with `command` (mtx by default).

    Volume arguments are Volume records; drive and slot arguments may be a Slot or a
    bare element id. Records are matched against the current inventory, so records
    from an older info() copy are fine to pass back in. Until status() has succeeded
    once, occupancy checks are skipped and moves only issue the mtx command.
    """

    def __init__(
        self,
        device: str,
        command: str = MTX_COMMAND,
        *,
        executor: Optional[CommandExecutor] = None,
        on_log: Optional[Callable[[str], None]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.device = device
        self.command = command
        self._executor = executor or run_mtx
        self._on_log = on_log
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self._inv = Inventory()
        self._initialized = False

    def __str__(self) -> str:
        return self.device

    def __repr__(self) -> str:
        return f"Library(device={self.device!r}, command={self.command!r})"

    @property
    def initialized(self) -> bool:
        """True once status() has populated the inventory."""
        with self._lock:
            return self._initialized

    def _log(self, line: str) -> None:
        if self._on_log:
            self._on_log(line)

    def _mtx(self, operation: str, *args: str) -> str:
        self._log("%s -f %s %s" % (self.command, self.device, " ".join(args)))
        try:
            return self._executor(self.command, self.device, list(args))
        except ExternalCommandFailed as e:
            self._log("%s failed: %s" % (operation, e.diagnostic))
            raise e.with_operation(operation) from e

    # --- inventory ---

    def status(self) -> Inventory:
        """
        Run mtx status and replace the inventory with the parsed result.
        Returns a copy of the new inventory. On any failure the previous inventory
        is kept. Raises ExternalCommandFailed or MalformedReport.
        """
        with self._lock:
            out = self._mtx("status", "status")
            try:
                inv = parse_status(out)
            except MalformedReport as e:
                self._log("status: %s" % e.detail)
                raise MalformedReport(e.detail, "status") from e
            self._inv = inv
            self._initialized = True
            self._log(
                "status: %d drives, %d slots, %d import/export, %d volumes"
                % (
                    inv.num_drives,
                    inv.num_storage_slots,
                    inv.num_mailbox_slots,
                    len(inv.volumes()),
                )
            )
            return copy.deepcopy(inv)

    def inventory(self) -> None:
        """
        Have the changer re-scan all slots (robot movement and barcode reading).
        The stored inventory is not touched; call status() afterwards.
        """
        with self._lock:
            self._mtx("inventory", "inventory")

    def info(self) -> Inventory:
        """Copy of the current inventory (empty before the first status())."""
        with self._lock:
            return copy.deepcopy(self._inv)

    # --- moves ---

    def load(self, vol: Volume, drive: SlotRef) -> Slot:
        """
        Load vol from its home slot into drive. Returns the drive slot after the move.
        Raises DriveNotAvailable, VolumeAlreadyInDrive, NoHomeSlot or ExternalCommandFailed.
        """
        with self._lock:
            return self._load(self._resolve(vol), _slot_id(drive), "load")

    def load_volume(self, vol: Volume) -> Slot:
        """Load vol into the lowest-numbered empty drive and return that drive slot."""
        with self._lock:
            empty = sorted(get_empty_drives(self._inv), key=element_sort_key)
            if not empty:
                raise DriveNotAvailable("no empty drive available for vol %s" % vol.id, "load")
            return self._load(self._resolve(vol), empty[0], "load")

    def load_cleaning_media(self, drive: SlotRef) -> Slot:
        """
        Load a cleaning cartridge into drive. The cartridge is picked at random among
        those available so wear is spread across all of them.
        """
        with self._lock:
            candidates = find_cleaning_media(self._inv)
            if not candidates:
                raise NoCleaningMediaAvailable("no cleaning media available", "loadcln")
            vol = self._rng.choice(candidates)
            return self._load(vol, _slot_id(drive), "loadcln")

    def unload(self, vol: Volume) -> Slot:
        """
        Return vol from its drive to its home slot. Returns the home slot after the move.
        Raises VolumeNotInDrive, NoHomeSlot, SlotNotAvailable or ExternalCommandFailed.
        """
        with self._lock:
            vol = self._resolve(vol)
            if not vol.in_drive:
                raise VolumeNotInDrive(
                    "attempting to unload vol %s not currently in a drive" % vol.id, "unload"
                )
            if not vol.home:
                raise NoHomeSlot("no home slot found for vol %s, can't unload" % vol.id, "unload")
            home = self._home_slot(vol.home)
            if home is not None and home.occupant is not None and home.occupant is not vol:
                raise SlotNotAvailable(
                    "home slot %s of vol %s holds vol %s" % (vol.home, vol.id, home.occupant.id),
                    "unload",
                )
            drive = self._inv.drives.get(vol.drive)
            if drive is not None and drive.occupant is not None and drive.occupant is not vol:
                raise VolumeNotInDrive(
                    "drive %s holds vol %s, not vol %s" % (vol.drive, drive.occupant.id, vol.id),
                    "unload",
                )

            drive_id = vol.drive
            self._mtx("unload", "unload", vol.home, drive_id)
            if not self._initialized:
                return Slot(SlotKind.UNKNOWN, vol.home, Volume(vol.id, vol.home))

            if drive is not None:
                drive.occupant = None
            if home is None:
                home = Slot(SlotKind.STORAGE, vol.home)
                self._inv.storage_slots[vol.home] = home
            vol.drive = ""
            home.occupant = vol
            self._log("unload: vol %s drive %s -> slot %s" % (vol.id, drive_id, vol.home))
            return copy.deepcopy(home)

    def transfer(self, vol: Volume, slot: SlotRef) -> Slot:
        """
        Move vol from its home slot to another storage or import/export slot, which
        becomes its new home. Returns the destination slot after the move.
        """
        with self._lock:
            vol = self._resolve(vol)
            dest_id = _slot_id(slot)
            if isinstance(slot, Slot) and slot.kind == SlotKind.DRIVE:
                raise SlotNotAvailable(
                    "cannot transfer vol %s into drive %s, use load" % (vol.id, dest_id), "transfer"
                )
            if vol.in_drive:
                raise VolumeAlreadyInDrive(
                    "vol %s is in drive %s, unload it before transfer" % (vol.id, vol.drive),
                    "transfer",
                )
            if not vol.home:
                raise NoHomeSlot("no home slot found for vol %s, can't transfer" % vol.id, "transfer")
            self._check_at_home(vol, "transfer")
            dest = self._home_slot(dest_id)
            if dest is not None and dest.occupant is not None and dest.occupant is not vol:
                raise SlotNotAvailable(
                    "slot %s already holds vol %s" % (dest_id, dest.occupant.id), "transfer"
                )

            source_id = vol.home
            self._mtx("transfer", "transfer", source_id, dest_id)
            if not self._initialized:
                return Slot(SlotKind.UNKNOWN, dest_id, Volume(vol.id, dest_id))

            source = self._home_slot(source_id)
            if source is not None:
                source.occupant = None
            if dest is None:
                dest = Slot(SlotKind.STORAGE, dest_id)
                self._inv.storage_slots[dest_id] = dest
            vol.home = dest_id
            dest.occupant = vol
            self._log("transfer: vol %s slot %s -> slot %s" % (vol.id, source_id, dest_id))
            return copy.deepcopy(dest)

    # --- internals (lock held) ---

    def _load(self, vol: Volume, drive_id: str, operation: str) -> Slot:
        if vol.in_drive:
            raise VolumeAlreadyInDrive(
                "attempting to load vol %s that is already in drive %s" % (vol.id, vol.drive),
                operation,
            )
        if not vol.home:
            raise NoHomeSlot("no home slot found for vol %s, can't load" % vol.id, operation)
        self._check_at_home(vol, operation)
        if self._initialized:
            drive = self._inv.drives.get(drive_id)
            if drive is not None and drive.occupant is not None:
                raise DriveNotAvailable(
                    "attempting to load vol %s into non-empty drive %s" % (vol.id, drive_id),
                    operation,
                )

        self._mtx(operation, "load", vol.home, drive_id)
        if not self._initialized:
            return Slot(SlotKind.DRIVE, drive_id, Volume(vol.id, vol.home, drive_id))

        home = self._home_slot(vol.home)
        if home is not None:
            home.occupant = None
        drive = self._inv.drives.get(drive_id)
        if drive is None:
            drive = Slot(SlotKind.DRIVE, drive_id)
            self._inv.drives[drive_id] = drive
        vol.drive = drive_id
        drive.occupant = vol
        self._log("%s: vol %s slot %s -> drive %s" % (operation, vol.id, vol.home, drive_id))
        return copy.deepcopy(drive)

    def _check_at_home(self, vol: Volume, operation: str) -> None:
        """Reject a move whose source slot holds some other known volume."""
        home = self._home_slot(vol.home)
        if home is not None and home.occupant is not None and home.occupant is not vol:
            raise NoHomeSlot(
                "slot %s holds vol %s, not vol %s" % (vol.home, home.occupant.id, vol.id),
                operation,
            )

    def _home_slot(self, slot_id: str) -> Optional[Slot]:
        slots = self._inv.home_map(slot_id)
        return slots[slot_id] if slots is not None else None

    def _resolve(self, vol: Volume) -> Volume:
        """
        Find the inventory's own record for vol: first where vol says it is, then by
        volume id anywhere. Unknown volumes get a private copy so the caller's
        record is never modified.
        """
        if vol.in_drive:
            slot = self._inv.drives.get(vol.drive)
        else:
            slot = self._home_slot(vol.home)
        if slot is not None and slot.occupant is not None and slot.occupant.id == vol.id:
            return slot.occupant
        if vol.id:
            for s in self._inv.all_slots():
                if s.occupant is not None and s.occupant.id == vol.id:
                    return s.occupant
        return copy.copy(vol)
