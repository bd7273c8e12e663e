from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from users.permissions_matrix import ROLE_CHOICES


class Action(models.TextChoices):
    CREATE_MEMBER = "CREATE_MEMBER", "Create member"
    UPDATE_MEMBER = "UPDATE_MEMBER", "Update member"
    DELETE_MEMBER = "DELETE_MEMBER", "Delete member"
    CREATE_TRANSACTION = "CREATE_TRANSACTION", "Create transaction"
    UPDATE_TRANSACTION = "UPDATE_TRANSACTION", "Update transaction"
    DELETE_TRANSACTION = "DELETE_TRANSACTION", "Delete transaction"
    MARK_TRANSACTION_PAID = "MARK_TRANSACTION_PAID", "Mark transaction paid"
    CREATE_ABSENCE = "CREATE_ABSENCE", "Create absence"
    UPDATE_ABSENCE = "UPDATE_ABSENCE", "Update absence"
    DELETE_ABSENCE = "DELETE_ABSENCE", "Delete absence"
    CREATE_CAMPAIGN = "CREATE_CAMPAIGN", "Create campaign"
    UPDATE_CAMPAIGN = "UPDATE_CAMPAIGN", "Update campaign"
    DELETE_CAMPAIGN = "DELETE_CAMPAIGN", "Delete campaign"
    CREATE_MK_LOG = "CREATE_MK_LOG", "Create campaign log"
    UPDATE_MK_LOG = "UPDATE_MK_LOG", "Update campaign log"
    DELETE_MK_LOG = "DELETE_MK_LOG", "Delete campaign log"
    LOGIN = "LOGIN", "Login"


class AppendOnlyError(Exception):
    pass


class ActivityLogQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise AppendOnlyError("Activity logs cannot be updated")

    def delete(self):
        raise AppendOnlyError("Activity logs cannot be deleted")


class ActivityLog(models.Model):
    """
    One row per successful mutating API call: who did what to which entity.
    Rows are written once and never changed.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="activity_logs",
    )
    # role held by the actor when the action happened
    role = models.CharField(max_length=20, choices=ROLE_CHOICES)
    action = models.CharField(max_length=40, choices=Action.choices, db_index=True)
    entity = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=64)
    details = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = ActivityLogQuerySet.as_manager()

    class Meta:
        ordering = ["-timestamp", "-id"]
        indexes = [
            models.Index(fields=["entity", "entity_id"], name="idx_activity_entity"),
        ]

    def __str__(self):
        return f"{self.user_id} | {self.action} {self.entity}#{self.entity_id}"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise AppendOnlyError("Activity logs cannot be updated")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AppendOnlyError("Activity logs cannot be deleted")
