from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

# Counters a campaign log may report; anything else in `metrics` is kept but not summed
METRIC_KEYS = ("reach", "engagement", "clicks", "conversions", "signups")


def metric_value(metrics, key) -> int:
    """Numeric value of one counter in a metrics bag (0 when absent or not a number)."""
    value = (metrics or {}).get(key) if isinstance(metrics, dict) else None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


class Campaign(models.Model):
    class CampaignType(models.TextChoices):
        DIGITAL = "DIGITAL", "Digital"
        SOCIAL_MEDIA = "SOCIAL_MEDIA", "Social media"
        EMAIL = "EMAIL", "Email"
        PRINT = "PRINT", "Print"
        EVENT = "EVENT", "Event"
        OTHER = "OTHER", "Other"

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        ACTIVE = "ACTIVE", "Active"
        PAUSED = "PAUSED", "Paused"
        COMPLETED = "COMPLETED", "Completed"
        CANCELLED = "CANCELLED", "Cancelled"

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    type = models.CharField(max_length=20, choices=CampaignType.choices)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT, db_index=True)
    budget = models.DecimalField(
        max_digits=12, decimal_places=2, blank=True, null=True, validators=[MinValueValidator(0)]
    )
    start_date = models.DateField()
    end_date = models.DateField(blank=True, null=True)
    target_audience = models.TextField(blank=True, null=True)
    goals = models.TextField(blank=True, null=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="campaigns_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["start_date", "end_date"], name="idx_campaign_window"),
        ]

    def __str__(self):
        return self.name


class CampaignLog(models.Model):
    campaign = models.ForeignKey(Campaign, on_delete=models.CASCADE, related_name="logs")
    activity = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    metrics = models.JSONField(blank=True, null=True)
    log_date = models.DateTimeField(default=timezone.now, db_index=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="campaign_logs_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-log_date", "-id"]

    def __str__(self):
        return f"{self.campaign_id}: {self.activity}"

    def metric(self, key) -> int:
        return metric_value(self.metrics, key)
