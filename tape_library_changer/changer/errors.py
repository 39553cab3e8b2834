"""
Errors raised by the media changer: report parsing, slot lookups, move preconditions
and failed mtx invocations. All derive from ChangerError.
"""
from typing import Optional

ChangerError = type("ChangerError", (Exception,), {})


class OperationError(ChangerError):
    """Error raised by a Library operation; message is prefixed with the operation name."""

    def __init__(self, message: str, operation: Optional[str] = None) -> None:
        self.operation = operation
        self.detail = message
        super().__init__(f"{operation}: {message}" if operation else message)


class MalformedReport(OperationError):
    """Status output has no usable summary line."""


class NotFound(ChangerError):
    """No slot with the requested id in the targeted map."""


class DriveNotAvailable(OperationError):
    """Target drive is occupied, or no drive is empty."""


class SlotNotAvailable(OperationError):
    """Destination storage/mailbox slot is occupied."""


class VolumeAlreadyInDrive(OperationError):
    """Volume to load or transfer is mounted in a drive."""


class VolumeNotInDrive(OperationError):
    """Volume to unload is not mounted in a drive."""


class NoHomeSlot(OperationError):
    """Volume has no known home slot."""


class NoCleaningMediaAvailable(OperationError):
    """No cleaning cartridge outside the drives."""


class ExternalCommandFailed(OperationError):
    """
    The changer command exited non-zero, could not be started, or timed out.
    diagnostic is the captured stderr (one trailing newline removed); returncode is
    None when the process never produced an exit status.
    """

    def __init__(
        self,
        diagnostic: str,
        *,
        returncode: Optional[int] = None,
        operation: Optional[str] = None,
    ) -> None:
        self.diagnostic = diagnostic
        self.returncode = returncode
        super().__init__(diagnostic, operation)

    def with_operation(self, operation: str) -> "ExternalCommandFailed":
        return ExternalCommandFailed(
            self.diagnostic, returncode=self.returncode, operation=operation
        )
