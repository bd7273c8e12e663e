import django.core.serializers.json
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ActivityLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("FRONT_OFFICE", "Front Office"),
                            ("ACCOUNTING", "Accounting"),
                            ("MARKETING", "Marketing"),
                            ("SUPERVISOR", "Supervisor"),
                            ("OWNER", "Owner"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("CREATE_MEMBER", "Create member"),
                            ("UPDATE_MEMBER", "Update member"),
                            ("DELETE_MEMBER", "Delete member"),
                            ("CREATE_TRANSACTION", "Create transaction"),
                            ("UPDATE_TRANSACTION", "Update transaction"),
                            ("DELETE_TRANSACTION", "Delete transaction"),
                            ("MARK_TRANSACTION_PAID", "Mark transaction paid"),
                            ("CREATE_ABSENCE", "Create absence"),
                            ("UPDATE_ABSENCE", "Update absence"),
                            ("DELETE_ABSENCE", "Delete absence"),
                            ("CREATE_CAMPAIGN", "Create campaign"),
                            ("UPDATE_CAMPAIGN", "Update campaign"),
                            ("DELETE_CAMPAIGN", "Delete campaign"),
                            ("CREATE_MK_LOG", "Create campaign log"),
                            ("UPDATE_MK_LOG", "Update campaign log"),
                            ("DELETE_MK_LOG", "Delete campaign log"),
                            ("LOGIN", "Login"),
                        ],
                        db_index=True,
                        max_length=40,
                    ),
                ),
                ("entity", models.CharField(max_length=50)),
                ("entity_id", models.CharField(max_length=64)),
                (
                    "details",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                    ),
                ),
                ("timestamp", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="activity_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-timestamp", "-id"],
                "indexes": [models.Index(fields=["entity", "entity_id"], name="idx_activity_entity")],
            },
        ),
    ]
