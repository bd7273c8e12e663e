# analytics/services.py
"""
Date-range aggregations behind /api/analytics and /api/dashboard/stats.

Ranges are whole days: [00:00:00 of start, 23:59:59.999999 of end], both
ends inclusive. The previous period has the same number of days and ends
right before `start`.
"""
import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Count, Q, Sum
from django.utils import timezone

from campaigns.models import METRIC_KEYS, Campaign, CampaignLog, metric_value
from members.models import Member, MemberAbsence
from transactions.models import CompanyTransaction, MemberTransaction
from users.permissions_matrix import (
    CAMPAIGNS,
    COMPANY_TRANSACTIONS,
    MEMBER_TRANSACTIONS,
    MEMBERS,
    can_read,
)

DEFAULT_RANGE = "last30days"
RANGE_DAYS = {
    "last7days": 7,
    "last30days": 30,
    "last90days": 90,
}
RANGE_PRESETS = (*RANGE_DAYS, "last12months")

# months shown in the trend chart per preset
TREND_MONTHS = {"last12months": 12, "last90days": 3}

TOP_CATEGORIES = 5
PENDING_PAYMENT_WINDOW_DAYS = 7
UPCOMING_EVENT_WINDOW_DAYS = 30

ZERO = Decimal("0")


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime
    preset: str

    @property
    def days(self) -> int:
        return (self.end.date() - self.start.date()).days + 1


# --------------------------- helpers ---------------------------


def start_of_day(d: date) -> datetime:
    return timezone.make_aware(datetime.combine(d, time.min))


def end_of_day(d: date) -> datetime:
    return timezone.make_aware(datetime.combine(d, time.max))


def _months_back(d: date, months: int) -> date:
    """Same day `months` earlier, clamped to the end of shorter months."""
    y, m = divmod(d.year * 12 + (d.month - 1) - months, 12)
    m += 1
    return date(y, m, min(d.day, calendar.monthrange(y, m)[1]))


def get_date_range(preset=None, start=None, end=None, today=None) -> DateRange:
    """
    Resolve a preset (or explicit start/end dates) to a DateRange.

    Explicit dates win over the preset; a missing end means today. Unknown
    presets fall back to last30days.
    """
    today = today or timezone.localdate()

    if start is not None:
        end = end or today
        if end < start:
            raise ValueError("end must not be before start")
        return DateRange(start_of_day(start), end_of_day(end), "custom")

    if preset not in RANGE_PRESETS:
        preset = DEFAULT_RANGE
    end = end or today
    if preset == "last12months":
        first = _months_back(end, 12)
    else:
        first = end - timedelta(days=RANGE_DAYS[preset])
    return DateRange(start_of_day(first), end_of_day(end), preset)


def previous_period(rng: DateRange) -> DateRange:
    """Equal-length window ending immediately before `rng.start`."""
    last = rng.start.date() - timedelta(days=1)
    first = last - timedelta(days=rng.days - 1)
    return DateRange(start_of_day(first), end_of_day(last), "previous")


def growth_percentage(current, previous) -> float:
    """(current - previous) / previous * 100, one decimal; 0 when previous is 0."""
    if not previous:
        return 0
    return round(float(current - previous) / float(previous) * 100, 1)


def month_buckets(end: date, months: int):
    """[(first_day, last_day), ...] for `months` calendar months ending with end's month."""
    out = []
    for i in range(months - 1, -1, -1):
        first = _months_back(end.replace(day=1), i)
        last = first.replace(day=calendar.monthrange(first.year, first.month)[1])
        out.append((first, last))
    return out


def _sum(qs, field="amount") -> Decimal:
    return qs.aggregate(total=Sum(field))["total"] or ZERO


def _completed(tx_type, rng: DateRange):
    return CompanyTransaction.objects.filter(
        type=tx_type,
        status=CompanyTransaction.Status.COMPLETED,
        transaction_date__gte=rng.start,
        transaction_date__lte=rng.end,
    )


def income_total(rng: DateRange) -> Decimal:
    return _sum(_completed(CompanyTransaction.TxType.INCOME, rng))


def expense_total(rng: DateRange) -> Decimal:
    return _sum(_completed(CompanyTransaction.TxType.EXPENSE, rng))


def income_by_category(rng: DateRange):
    """[{category, amount}] for completed income in range, largest first."""
    rows = (
        _completed(CompanyTransaction.TxType.INCOME, rng)
        .values("category")
        .annotate(amount=Sum("amount"))
        .order_by("-amount", "category")
    )
    return [{"category": r["category"], "amount": r["amount"] or ZERO} for r in rows]


# --------------------------- sections ---------------------------


def member_stats(rng: DateRange) -> dict:
    counts = Member.objects.aggregate(
        total=Count("id"),
        active=Count("id", filter=Q(is_active=True)),
    )
    prev = previous_period(rng)
    new_now = Member.objects.filter(created_at__gte=rng.start, created_at__lte=rng.end).count()
    new_prev = Member.objects.filter(created_at__gte=prev.start, created_at__lte=prev.end).count()
    return {
        "total": counts["total"],
        "active": counts["active"],
        "inactive": counts["total"] - counts["active"],
        "new_in_range": new_now,
        "growth_percentage": growth_percentage(new_now, new_prev),
    }


def revenue_stats(rng: DateRange, by_category=None) -> dict:
    revenue = income_total(rng)
    expenses = expense_total(rng)
    previous = income_total(previous_period(rng))
    if by_category is None:
        by_category = income_by_category(rng)
    return {
        "total_revenue": revenue,
        "total_expenses": expenses,
        "net_profit": revenue - expenses,
        "revenue_growth": growth_percentage(revenue, previous),
        "top_categories": [
            {"name": row["category"], "value": row["amount"]}
            for row in by_category[:TOP_CATEGORIES]
        ],
    }


def revenue_breakdown(by_category) -> list:
    """Per-category income with whole-number share of the total."""
    total = sum((row["amount"] for row in by_category), ZERO)
    out = []
    for row in by_category:
        pct = int((row["amount"] / total * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)) if total else 0
        out.append({"category": row["category"], "amount": row["amount"], "percentage": pct})
    return out


def membership_trends(rng: DateRange) -> list:
    months = TREND_MONTHS.get(rng.preset, 1)
    out = []
    for first, last in month_buckets(rng.end.date(), months):
        lo, hi = start_of_day(first), end_of_day(last)
        month = DateRange(lo, hi, "month")
        out.append(
            {
                "month": first.strftime("%b %Y"),
                "new_members": Member.objects.filter(created_at__gte=lo, created_at__lte=hi).count(),
                "deactivated_members": Member.objects.filter(
                    is_active=False, updated_at__gte=lo, updated_at__lte=hi
                ).count(),
                "total_members": Member.objects.filter(created_at__lte=hi).count(),
                "revenue": income_total(month),
                "expenses": expense_total(month),
            }
        )
    return out


def campaign_performance(rng: DateRange) -> list:
    """Summed log metrics for every campaign whose run overlaps the range."""
    campaigns = (
        Campaign.objects.filter(start_date__lte=rng.end.date())
        .filter(Q(end_date__isnull=True) | Q(end_date__gte=rng.start.date()))
        .order_by("start_date", "id")
    )
    logs = CampaignLog.objects.filter(
        campaign__in=campaigns, log_date__gte=rng.start, log_date__lte=rng.end
    ).only("campaign_id", "metrics")

    totals = {c.id: dict.fromkeys(METRIC_KEYS, 0) for c in campaigns}
    for log in logs:
        bucket = totals[log.campaign_id]
        for key in METRIC_KEYS:
            bucket[key] += log.metric(key)

    return [
        {"id": c.id, "name": c.name, "status": c.status, **totals[c.id]}
        for c in campaigns
    ]


def analytics_report(rng: DateRange) -> dict:
    by_category = income_by_category(rng)
    return {
        "range": {
            "preset": rng.preset,
            "start": rng.start,
            "end": rng.end,
        },
        "member_stats": member_stats(rng),
        "revenue_stats": revenue_stats(rng, by_category),
        "membership_trends": membership_trends(rng),
        "revenue_breakdown": revenue_breakdown(by_category),
        "campaign_performance": campaign_performance(rng),
    }


# --------------------------- dashboard ---------------------------


def conversion_rate() -> float:
    """Conversions per reach across all campaign logs, as a percentage."""
    reach = conversions = 0
    for metrics in CampaignLog.objects.exclude(metrics__isnull=True).values_list("metrics", flat=True):
        reach += metric_value(metrics, "reach")
        conversions += metric_value(metrics, "conversions")
    if not reach:
        return 0
    return round(conversions / reach * 100, 1)


def dashboard_stats(role, today=None) -> dict:
    """Headline numbers, one section per resource family the role can read."""
    today = today or timezone.localdate()
    stats = {}

    if can_read(role, MEMBERS):
        counts = Member.objects.aggregate(
            total=Count("id"),
            active=Count("id", filter=Q(is_active=True)),
        )
        stats["total_members"] = counts["total"]
        stats["active_members"] = counts["active"]
        stats["today_absences"] = MemberAbsence.objects.filter(date=today).count()

    if can_read(role, COMPANY_TRANSACTIONS):
        first = today.replace(day=1)
        last = today.replace(day=calendar.monthrange(today.year, today.month)[1])
        stats["monthly_revenue"] = income_total(
            DateRange(start_of_day(first), end_of_day(last), "month")
        )

    if can_read(role, MEMBER_TRANSACTIONS):
        stats["pending_payments"] = MemberTransaction.objects.filter(
            status=MemberTransaction.Status.PENDING,
            due_date__lte=today + timedelta(days=PENDING_PAYMENT_WINDOW_DAYS),
        ).count()

    if can_read(role, CAMPAIGNS):
        stats["active_campaigns"] = (
            Campaign.objects.filter(status=Campaign.Status.ACTIVE, start_date__lte=today)
            .filter(Q(end_date__isnull=True) | Q(end_date__gte=today))
            .count()
        )
        stats["conversion_rate"] = conversion_rate()
        stats["upcoming_events"] = Campaign.objects.filter(
            type=Campaign.CampaignType.EVENT,
            start_date__gt=today,
            start_date__lte=today + timedelta(days=UPCOMING_EVENT_WINDOW_DAYS),
        ).exclude(status=Campaign.Status.CANCELLED).count()

    return stats
