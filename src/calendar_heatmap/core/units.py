"""Domain/subdomain unit compatibility rules."""

from __future__ import annotations

from .enums import TimeUnit
from .errors import ConfigurationError

# Default subdomain for each domain when none is configured.
_OPTIMAL_SUB_DOMAIN: dict[TimeUnit, TimeUnit] = {
    TimeUnit.YEAR: TimeUnit.MONTH,
    TimeUnit.MONTH: TimeUnit.DAY,
    TimeUnit.WEEK: TimeUnit.DAY,
    TimeUnit.DAY: TimeUnit.HOUR,
    TimeUnit.HOUR: TimeUnit.MINUTE,
}


def optimal_sub_domain(domain: TimeUnit | str) -> TimeUnit:
    """Return the natural subdomain unit for *domain*."""
    domain = TimeUnit.parse(domain)
    try:
        return _OPTIMAL_SUB_DOMAIN[domain]
    except KeyError:
        raise ConfigurationError(
            f"The domain '{domain.value}' is not valid"
        ) from None


def validate_unit_pair(domain: TimeUnit | str, sub_domain: TimeUnit | str) -> None:
    """Reject unit pairs that cannot be laid out.

    * the domain cannot be a minute nor a transposed unit,
    * the subdomain cannot be a year,
    * the subdomain must be strictly finer than the domain.
    """
    domain = TimeUnit.parse(domain)
    sub_domain = TimeUnit.parse(sub_domain)

    if domain.transposed or domain == TimeUnit.MINUTE:
        raise ConfigurationError(f"The domain '{domain.value}' is not valid")

    if sub_domain.base == TimeUnit.YEAR:
        raise ConfigurationError(
            f"The subDomain '{sub_domain.value}' is not valid"
        )

    if not sub_domain.is_finer_than(domain):
        raise ConfigurationError(
            f"'{sub_domain.value}' is not a valid subDomain to '{domain.value}'"
        )
