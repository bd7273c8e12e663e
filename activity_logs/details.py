# activity_logs/details.py
"""
Typed `details` payloads, one variant per action verb.

Each variant is a frozen dataclass listing the keys that action stores, so the
JSON column keeps a predictable shape per action and can be filtered on
(e.g. ``details__member_code``).
"""
from dataclasses import asdict, dataclass, fields
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from django.db import models

from .models import Action


@dataclass(frozen=True)
class MemberDetails:
    member_code: str
    name: str


@dataclass(frozen=True)
class ChangeDetails:
    changes: dict


@dataclass(frozen=True)
class TransactionDetails:
    transaction_code: str
    amount: Any
    type: str
    category: Optional[str] = None
    member_code: Optional[str] = None


@dataclass(frozen=True)
class MarkPaidDetails:
    transaction_code: str
    paid_date: Any


@dataclass(frozen=True)
class AbsenceDetails:
    member_id: int
    date: Any
    type: str


@dataclass(frozen=True)
class CampaignDetails:
    name: str
    type: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class CampaignLogDetails:
    activity: str
    campaign_id: Optional[int] = None


@dataclass(frozen=True)
class LoginDetails:
    ip_address: Optional[str] = None


DETAIL_TYPES = {
    Action.CREATE_MEMBER: MemberDetails,
    Action.UPDATE_MEMBER: ChangeDetails,
    Action.DELETE_MEMBER: MemberDetails,
    Action.CREATE_TRANSACTION: TransactionDetails,
    Action.UPDATE_TRANSACTION: ChangeDetails,
    Action.DELETE_TRANSACTION: TransactionDetails,
    Action.MARK_TRANSACTION_PAID: MarkPaidDetails,
    Action.CREATE_ABSENCE: AbsenceDetails,
    Action.UPDATE_ABSENCE: ChangeDetails,
    Action.DELETE_ABSENCE: AbsenceDetails,
    Action.CREATE_CAMPAIGN: CampaignDetails,
    Action.UPDATE_CAMPAIGN: ChangeDetails,
    Action.DELETE_CAMPAIGN: CampaignDetails,
    Action.CREATE_MK_LOG: CampaignLogDetails,
    Action.UPDATE_MK_LOG: ChangeDetails,
    Action.DELETE_MK_LOG: CampaignLogDetails,
    Action.LOGIN: LoginDetails,
}


def jsonable(value):
    """Reduce model instances, decimals and dates to plain JSON values."""
    if isinstance(value, models.Model):
        return value.pk
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [jsonable(v) for v in value]
    return value


def build_details(action, **values) -> dict:
    """
    Validate `values` against the variant registered for `action` and return
    the JSON-ready dict. Unknown or missing keys raise ValueError.
    """
    try:
        variant = DETAIL_TYPES[Action(action)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown activity action: {action!r}")

    allowed = {f.name for f in fields(variant)}
    unknown = set(values) - allowed
    if unknown:
        raise ValueError(f"{action} details do not accept: {', '.join(sorted(unknown))}")
    try:
        payload = variant(**values)
    except TypeError as exc:
        raise ValueError(f"{action} details are incomplete: {exc}")

    return {k: jsonable(v) for k, v in asdict(payload).items() if v is not None}
