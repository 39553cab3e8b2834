"""Configuration: changer command, device and timeouts from the environment."""
import os

# Changer-control executable (mtx or a compatible wrapper)
MTX_COMMAND = os.getenv("MTX_CHANGER_COMMAND", "mtx")

# Default changer device for the command line (e.g. /dev/sg3)
MTX_DEVICE = os.getenv("MTX_CHANGER_DEVICE", "/dev/changer")

# Robot moves take seconds; a full inventory scan on a large library takes minutes
MTX_TIMEOUT_SEC = int(os.getenv("MTX_CHANGER_TIMEOUT", "900"))

# Volume tags of cleaning cartridges start with this
CLEANING_PREFIX = "CLN"
