from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from activity_logs.models import Action, ActivityLog
from campaigns.models import Campaign, CampaignLog, metric_value
from users.models import User


class CampaignApiTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.marketing = User.objects.create_user("marketing", "pw", full_name="Marketing Staff", role="MARKETING")
        self.client.force_authenticate(user=self.marketing)

    def _campaign(self, **extra):
        payload = {
            "name": "Summer Fitness Challenge",
            "type": "EVENT",
            "status": "ACTIVE",
            "budget": "1000.00",
            "start_date": "2024-06-01",
            "end_date": "2024-06-30",
        }
        payload.update(extra)
        return self.client.post("/api/campaigns/", payload, format="json")

    def test_create_and_delete_are_logged(self):
        res = self._campaign()
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.content)
        self.assertEqual(res.data["log_count"], 0)
        log = ActivityLog.objects.get(action=Action.CREATE_CAMPAIGN)
        self.assertEqual(log.details, {"name": "Summer Fitness Challenge", "type": "EVENT", "status": "ACTIVE"})

        res = self.client.delete(f"/api/campaigns/{res.data['id']}/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        log = ActivityLog.objects.get(action=Action.DELETE_CAMPAIGN)
        self.assertEqual(log.details, {"name": "Summer Fitness Challenge"})

    def test_end_before_start_is_422(self):
        res = self._campaign(end_date="2024-05-01")
        self.assertEqual(res.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertIn("end_date", res.data["fields"])

    def test_open_ended_campaign(self):
        res = self._campaign(end_date=None, budget=None)
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.content)
        self.assertIsNone(res.data["end_date"])

    def test_update_status(self):
        campaign_id = self._campaign().data["id"]
        res = self.client.patch(f"/api/campaigns/{campaign_id}/", {"status": "PAUSED"}, format="json")
        self.assertEqual(res.data["status"], "PAUSED")
        log = ActivityLog.objects.get(action=Action.UPDATE_CAMPAIGN)
        self.assertEqual(log.details, {"changes": {"status": "PAUSED"}})


class CampaignLogApiTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.marketing = User.objects.create_user("marketing", "pw", full_name="Marketing Staff", role="MARKETING")
        self.client.force_authenticate(user=self.marketing)
        self.campaign = Campaign.objects.create(
            name="Summer Fitness Challenge", type="EVENT", status="ACTIVE", start_date="2024-06-01"
        )

    def test_create_log_expands_campaign(self):
        res = self.client.post(
            "/api/campaign-logs/",
            {
                "campaign_id": self.campaign.pk,
                "activity": "Campaign Launch",
                "metrics": {"reach": 500, "engagement": 50, "signups": 10},
                "log_date": "2024-06-02",
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.content)
        self.assertEqual(
            res.data["campaign"], {"id": self.campaign.pk, "name": "Summer Fitness Challenge", "status": "ACTIVE"}
        )
        log = ActivityLog.objects.get(action=Action.CREATE_MK_LOG)
        self.assertEqual(log.details, {"campaign_id": self.campaign.pk, "activity": "Campaign Launch"})

    def test_negative_metric_is_422(self):
        res = self.client.post(
            "/api/campaign-logs/",
            {"campaign_id": self.campaign.pk, "activity": "Flyers", "metrics": {"reach": -5}},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertFalse(CampaignLog.objects.exists())

    def test_filter_by_campaign(self):
        other = Campaign.objects.create(name="Other", type="EMAIL", start_date="2024-01-01")
        CampaignLog.objects.create(campaign=self.campaign, activity="A")
        CampaignLog.objects.create(campaign=other, activity="B")

        res = self.client.get("/api/campaign-logs/", {"campaign": other.pk})
        self.assertEqual([row["activity"] for row in res.data], ["B"])

    def test_delete_log(self):
        entry = CampaignLog.objects.create(campaign=self.campaign, activity="Poster drop")
        res = self.client.delete(f"/api/campaign-logs/{entry.pk}/")
        self.assertEqual(res.data, {"success": True})
        log = ActivityLog.objects.get(action=Action.DELETE_MK_LOG)
        self.assertEqual(log.details, {"activity": "Poster drop"})

    def test_metric_value_ignores_junk(self):
        self.assertEqual(metric_value({"reach": 3.7}, "reach"), 3)
        self.assertEqual(metric_value({"reach": "10"}, "reach"), 0)
        self.assertEqual(metric_value({"reach": True}, "reach"), 0)
        self.assertEqual(metric_value(None, "reach"), 0)
        self.assertEqual(metric_value([1, 2], "reach"), 0)
