"""Entry point: query or rescan a media changer from the command line."""
import sys

from .config import MTX_DEVICE
from .changer import (
    ChangerError,
    Library,
    element_sort_key,
    find_cleaning_media,
    get_empty_drives,
)

USAGE = "usage: python -m tape_library_changer [--device PATH] status|inventory|empty-drives|cleaning"


def _print_inventory(lib: Library) -> None:
    inv = lib.status()
    print(
        "%s: %d drives, %d slots, %d import/export"
        % (lib, inv.num_drives, inv.num_storage_slots, inv.num_mailbox_slots)
    )
    for title, slots in (
        ("Drive", inv.drives),
        ("Slot", inv.storage_slots),
        ("Import/Export", inv.mailbox_slots),
    ):
        for slot_id in sorted(slots, key=element_sort_key):
            vol = slots[slot_id].occupant
            if vol is None:
                print(f"{title} {slot_id}: empty")
            elif vol.in_drive:
                print(f"{title} {slot_id}: {vol.id} (home {vol.home})")
            else:
                print(f"{title} {slot_id}: {vol.id}")


def main() -> None:
    args = sys.argv[1:]
    device = MTX_DEVICE
    if "--device" in args:
        i = args.index("--device")
        if i + 1 >= len(args):
            print(USAGE)
            sys.exit(2)
        device = args[i + 1]
        del args[i : i + 2]
    if len(args) != 1:
        print(USAGE)
        sys.exit(2)

    lib = Library(device)
    try:
        if args[0] == "status":
            _print_inventory(lib)
        elif args[0] == "inventory":
            lib.inventory()
            print(f"{lib}: inventory complete")
        elif args[0] == "empty-drives":
            inv = lib.status()
            for drive_id in sorted(get_empty_drives(inv), key=element_sort_key):
                print(drive_id)
        elif args[0] == "cleaning":
            inv = lib.status()
            for vol in find_cleaning_media(inv):
                print(f"{vol.id} (slot {vol.home})")
        else:
            print(USAGE)
            sys.exit(2)
    except ChangerError as e:
        print(e, file=sys.stderr)
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
