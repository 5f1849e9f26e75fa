"""Create a pre-verified account directly in the configured database."""

import argparse
import getpass
import sys

from servicehub.core.config import Settings
from servicehub.core.container import build_container
from servicehub.core.logging import configure_logging
from servicehub.domain.exceptions import ConflictError
from servicehub.domain.models import Role


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("--name")
    parser.add_argument("--role", choices=[role.value for role in Role], default=Role.CUSTOMER.value)
    parser.add_argument("--provider-type", help="Only used for SERVICE_PROVIDER accounts")
    args = parser.parse_args()

    configure_logging()
    settings = Settings()
    # Operator-created accounts skip the email round trip.
    settings.email_verification_enabled = False
    container = build_container(settings)

    password = getpass.getpass("Password: ")
    if not password:
        print("Password must not be empty.", file=sys.stderr)
        return 1

    try:
        registration = container.account_service.register(
            email=args.email,
            password=password,
            name=args.name,
            role=Role(args.role),
            provider_type=args.provider_type,
        )
    except ConflictError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    finally:
        container.close()

    print(f"Created account {registration.account.id} for {registration.account.email}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
