"""Print an ``ADMIN_PASSWORD_HASH`` line for the dashboard password.

Run from the project root so the ``.env`` settings load.
"""

import getpass
import sys

from clinic_api.core.security import get_password_hash


def main() -> int:
    """Prompt for the password twice and print the env line."""
    password = getpass.getpass("Admin password: ")
    if len(password) < 8:
        print("Password must be at least 8 characters", file=sys.stderr)
        return 1

    if getpass.getpass("Repeat password: ") != password:
        print("Passwords do not match", file=sys.stderr)
        return 1

    print(f"ADMIN_PASSWORD_HASH={get_password_hash(password)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
