# backend/consol_fx/services/fx/requirements.py
"""
Build validation requirements from a group's member currencies.

The orchestrator knows each member company's functional currency. These
helpers turn that map into the Requirement list the validator expects:
one pair per foreign currency, quoted against the reporting currency.

Example:
    members = {1: "idr", 2: "USD", 3: "JPY", 4: ""}
    collect_required_currencies(members, "USD")        # {"IDR", "JPY"}
    build_requirements({"IDR", "JPY"}, "USD")
    # [Requirement("IDRUSD", (AVERAGE, CLOSING)),
    #  Requirement("JPYUSD", (AVERAGE, CLOSING))]
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Hashable

from consol_fx.services.exceptions import ValidationError
from consol_fx.services.fx.policy import Policy
from consol_fx.services.fx.types import (
    CurrencyPair,
    Method,
    Requirement,
    normalize_currency,
    sort_methods,
)

ALL_METHODS: tuple[Method, ...] = (Method.AVERAGE, Method.CLOSING)


def collect_required_currencies(
        member_currencies: Mapping[Hashable, str],
        reporting_currency: str,
        included: Iterable[Hashable] | None = None,
) -> set[str]:
    """
    Distinct foreign currencies among group members.

    Blank currencies and the reporting currency itself need no rate and
    are skipped.

    Args:
        member_currencies: Member id -> functional currency
        reporting_currency: Group reporting currency
        included: Member ids to consider; None means every member

    Returns:
        Normalised currency codes that need a rate
    """
    reporting = normalize_currency(reporting_currency)
    if included is None:
        candidates = member_currencies.values()
    else:
        candidates = (member_currencies.get(member_id, "") for member_id in included)

    required: set[str] = set()
    for currency in candidates:
        code = normalize_currency(currency)
        if code and code != reporting:
            required.add(code)
    return required


def build_requirements(
        currencies: Iterable[str],
        reporting_currency: str,
        methods: Iterable[Method | str] = ALL_METHODS,
) -> list[Requirement]:
    """
    One Requirement per currency, quoted against the reporting currency.

    Args:
        currencies: Foreign currency codes
        reporting_currency: Group reporting currency
        methods: Methods every pair must support

    Returns:
        Requirements sorted by pair code

    Raises:
        ValidationError: If the reporting currency is empty
        UnsupportedMethodError: If a method is not AVERAGE / CLOSING
    """
    reporting = normalize_currency(reporting_currency)
    if not reporting:
        raise ValidationError("Reporting currency required", field="reporting_currency")

    wanted = sort_methods(Method.parse(method) for method in methods)
    pairs = {
        CurrencyPair(base=currency, quote=reporting).code
        for currency in currencies
        if normalize_currency(currency) and normalize_currency(currency) != reporting
    }
    return [Requirement(pair=pair, methods=wanted) for pair in sorted(pairs)]


def requirements_for_policy(
        member_currencies: Mapping[Hashable, str],
        policy: Policy,
        included: Iterable[Hashable] | None = None,
) -> list[Requirement]:
    """
    Requirements for converting both statements of the given members.

    Only the methods the policy actually uses are required, so a policy
    translating both statements at CLOSING never reports AVERAGE gaps.

    Raises:
        ValidationError: If the policy has no reporting currency
    """
    currencies = collect_required_currencies(member_currencies, policy.reporting_currency, included)
    return build_requirements(currencies, policy.reporting_currency, policy.required_methods)
