"""Translation of domain errors into click failures with distinct exit codes."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException

# 1 is click's generic failure and 2 its usage error
EXIT_CODES = {
    "validation": 3,
    "business_rule": 4,
    "insufficient_stock": 4,
    "invalid_transition": 5,
    "permission_denied": 6,
    "not_found": 7,
}


def domain_failure(exc: DomainException) -> click.ClickException:
    failure = click.ClickException(str(exc))
    failure.exit_code = EXIT_CODES.get(exc.code, 1)
    return failure
