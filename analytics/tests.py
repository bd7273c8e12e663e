from datetime import date, datetime, time, timedelta
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from analytics.services import (
    campaign_performance,
    dashboard_stats,
    end_of_day,
    get_date_range,
    growth_percentage,
    income_total,
    month_buckets,
    previous_period,
    revenue_breakdown,
    start_of_day,
)
from campaigns.models import Campaign, CampaignLog
from members.models import Member, MemberAbsence
from transactions.models import CompanyTransaction, MemberTransaction
from users.models import User


def company_tx(code, when, amount, tx_type="INCOME", category="Membership Fees", status="COMPLETED"):
    return CompanyTransaction.objects.create(
        transaction_code=code,
        type=tx_type,
        category=category,
        amount=Decimal(amount),
        status=status,
        transaction_date=when,
    )


class DateRangeTests(SimpleTestCase):
    today = date(2024, 3, 15)

    def test_preset_is_whole_days(self):
        rng = get_date_range("last7days", today=self.today)
        self.assertEqual(timezone.localtime(rng.start), start_of_day(date(2024, 3, 8)))
        self.assertEqual(rng.end.time(), time.max)
        self.assertEqual(rng.end.date(), self.today)

    def test_twelve_months(self):
        rng = get_date_range("last12months", today=date(2024, 2, 29))
        self.assertEqual(rng.start.date(), date(2023, 2, 28))

    def test_unknown_preset_defaults_to_thirty_days(self):
        rng = get_date_range("yesterday-ish", today=self.today)
        self.assertEqual(rng.preset, "last30days")
        self.assertEqual(rng.start.date(), self.today - timedelta(days=30))

    def test_explicit_dates(self):
        rng = get_date_range(start=date(2024, 1, 1), end=date(2024, 1, 31))
        self.assertEqual(rng.days, 31)
        with self.assertRaises(ValueError):
            get_date_range(start=date(2024, 2, 1), end=date(2024, 1, 1))

    def test_previous_period_has_equal_length(self):
        rng = get_date_range("last7days", today=self.today)
        prev = previous_period(rng)
        self.assertEqual(prev.days, rng.days)
        self.assertEqual(prev.end.date(), date(2024, 3, 7))
        self.assertEqual(prev.start.date(), date(2024, 2, 29))

    def test_growth(self):
        self.assertEqual(growth_percentage(5, 0), 0)
        self.assertEqual(growth_percentage(15, 10), 50.0)
        self.assertEqual(growth_percentage(5, 10), -50.0)
        self.assertEqual(growth_percentage(Decimal("110.50"), Decimal("100")), 10.5)
        self.assertEqual(growth_percentage(4, 3), 33.3)

    def test_month_buckets(self):
        buckets = month_buckets(date(2024, 3, 15), 3)
        self.assertEqual(
            buckets,
            [
                (date(2024, 1, 1), date(2024, 1, 31)),
                (date(2024, 2, 1), date(2024, 2, 29)),
                (date(2024, 3, 1), date(2024, 3, 31)),
            ],
        )
        self.assertEqual(month_buckets(date(2024, 1, 10), 2)[0], (date(2023, 12, 1), date(2023, 12, 31)))

    def test_revenue_breakdown_percentages(self):
        rows = [
            {"category": "Membership Fees", "amount": Decimal("200")},
            {"category": "Personal Training", "amount": Decimal("100")},
        ]
        out = revenue_breakdown(rows)
        self.assertEqual([r["percentage"] for r in out], [67, 33])
        self.assertEqual(revenue_breakdown([]), [])


class AggregationTests(TestCase):
    def test_revenue_window_is_inclusive(self):
        rng = get_date_range(start=date(2024, 3, 1), end=date(2024, 3, 31))
        company_tx("C1", start_of_day(date(2024, 3, 1)), "100")
        company_tx("C2", end_of_day(date(2024, 3, 31)), "10")
        company_tx("C3", start_of_day(date(2024, 4, 1)), "1000")
        company_tx("C4", end_of_day(date(2024, 2, 29)), "1000")
        company_tx("C5", start_of_day(date(2024, 3, 10)), "1000", status="PENDING")
        company_tx("C6", start_of_day(date(2024, 3, 10)), "1000", tx_type="EXPENSE", category="Rent")

        self.assertEqual(income_total(rng), Decimal("110"))

    def test_empty_totals_are_zero(self):
        rng = get_date_range(start=date(2024, 3, 1), end=date(2024, 3, 31))
        self.assertEqual(income_total(rng), Decimal("0"))

    def test_campaign_performance_uses_overlap_and_log_window(self):
        rng = get_date_range(start=date(2024, 6, 1), end=date(2024, 6, 30))
        running = Campaign.objects.create(
            name="Summer", type="EVENT", status="PAUSED", start_date=date(2024, 5, 20), end_date=date(2024, 6, 10)
        )
        open_ended = Campaign.objects.create(name="Always on", type="DIGITAL", status="ACTIVE", start_date=date(2024, 1, 1))
        Campaign.objects.create(name="Old", type="PRINT", start_date=date(2024, 1, 1), end_date=date(2024, 2, 1))
        Campaign.objects.create(name="Later", type="EMAIL", start_date=date(2024, 7, 1))

        inside = timezone.make_aware(datetime(2024, 6, 5, 12, 0))
        CampaignLog.objects.create(campaign=running, activity="a", log_date=inside,
                                   metrics={"reach": 100, "conversions": 4, "signups": 2})
        CampaignLog.objects.create(campaign=running, activity="b", log_date=inside,
                                   metrics={"reach": 50, "clicks": 7})
        CampaignLog.objects.create(campaign=running, activity="early", log_date=start_of_day(date(2024, 5, 25)),
                                   metrics={"reach": 999})

        rows = {row["name"]: row for row in campaign_performance(rng)}
        self.assertEqual(set(rows), {"Summer", "Always on"})
        self.assertEqual(rows["Summer"]["reach"], 150)
        self.assertEqual(rows["Summer"]["clicks"], 7)
        self.assertEqual(rows["Summer"]["conversions"], 4)
        self.assertEqual(rows["Summer"]["signups"], 2)
        self.assertEqual(rows["Always on"]["reach"], 0)
        self.assertEqual(rows["Always on"]["id"], open_ended.pk)


class AnalyticsApiTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user("owner", "pw", full_name="Gym Owner", role="OWNER")
        self.client.force_authenticate(user=self.owner)

    def test_report_shape(self):
        now = timezone.now()
        Member.objects.create(member_code="MEM990300", name="New")
        old = Member.objects.create(member_code="MEM990301", name="Old")
        Member.objects.filter(pk=old.pk).update(created_at=now - timedelta(days=400))
        company_tx("C1", now, "5000")
        company_tx("C2", now, "2000", tx_type="EXPENSE", category="Rent")

        res = self.client.get("/api/analytics/", {"range": "last12months"})
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.content)

        members = res.data["member_stats"]
        self.assertEqual(members["total"], 2)
        self.assertEqual(members["new_in_range"], 1)
        self.assertEqual(members["growth_percentage"], 0)

        revenue = res.data["revenue_stats"]
        self.assertEqual(revenue["total_revenue"], Decimal("5000"))
        self.assertEqual(revenue["net_profit"], Decimal("3000"))
        self.assertEqual(revenue["top_categories"], [{"name": "Membership Fees", "value": Decimal("5000")}])

        self.assertEqual(len(res.data["membership_trends"]), 12)
        self.assertEqual(res.data["membership_trends"][-1]["revenue"], Decimal("5000"))
        self.assertEqual(res.data["revenue_breakdown"][0]["percentage"], 100)

    def test_trend_months_follow_preset(self):
        self.assertEqual(len(self.client.get("/api/analytics/").data["membership_trends"]), 1)
        res = self.client.get("/api/analytics", {"range": "last90days"})
        self.assertEqual(len(res.data["membership_trends"]), 3)

    def test_custom_range(self):
        res = self.client.get("/api/analytics/", {"start": "2024-01-01", "end": "2024-01-31"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["range"]["preset"], "custom")

    def test_bad_dates_are_422(self):
        self.assertEqual(
            self.client.get("/api/analytics/", {"start": "not-a-date"}).status_code,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
        self.assertEqual(
            self.client.get("/api/analytics/", {"start": "2024-02-01", "end": "2024-01-01"}).status_code,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    def test_owner_only(self):
        supervisor = User.objects.create_user("supervisor", "pw", full_name="Sup", role="SUPERVISOR")
        self.client.force_authenticate(user=supervisor)
        self.assertEqual(self.client.get("/api/analytics/").status_code, status.HTTP_403_FORBIDDEN)


class DashboardStatsTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        today = timezone.localdate()
        member = Member.objects.create(member_code="MEM990400", name="Jane")
        Member.objects.create(member_code="MEM990401", name="Gone", is_active=False)
        MemberAbsence.objects.create(member=member, date=today, type="SICK")
        MemberTransaction.objects.create(
            transaction_code="TRX-due", member=member, type="MEMBERSHIP_FEE",
            amount=Decimal("50"), due_date=today + timedelta(days=3),
        )
        MemberTransaction.objects.create(
            transaction_code="TRX-later", member=member, type="MEMBERSHIP_FEE",
            amount=Decimal("50"), due_date=today + timedelta(days=30),
        )
        company_tx("C1", timezone.now(), "750")
        Campaign.objects.create(name="Open Day", type="EVENT", status="DRAFT", start_date=today + timedelta(days=10))
        live = Campaign.objects.create(name="Live", type="DIGITAL", status="ACTIVE", start_date=today)
        CampaignLog.objects.create(campaign=live, activity="ads", metrics={"reach": 200, "conversions": 5})

    def test_front_office_sees_members_section(self):
        front = User.objects.create_user("frontoffice", "pw", full_name="Front", role="FRONT_OFFICE")
        self.client.force_authenticate(user=front)
        res = self.client.get("/api/dashboard/stats")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(
            res.data,
            {"total_members": 2, "active_members": 1, "today_absences": 1, "pending_payments": 1},
        )

    def test_owner_sees_everything(self):
        stats = dashboard_stats("OWNER")
        self.assertEqual(stats["monthly_revenue"], Decimal("750"))
        self.assertEqual(stats["active_campaigns"], 1)
        self.assertEqual(stats["conversion_rate"], 2.5)
        self.assertEqual(stats["upcoming_events"], 1)

    def test_marketing_sees_only_marketing(self):
        self.assertEqual(set(dashboard_stats("MARKETING")), {"active_campaigns", "conversion_rate", "upcoming_events"})

    def test_unknown_role_gets_nothing(self):
        self.assertEqual(dashboard_stats("JANITOR"), {})

    def test_requires_login(self):
        self.assertEqual(self.client.get("/api/dashboard/stats/").status_code, status.HTTP_401_UNAUTHORIZED)
