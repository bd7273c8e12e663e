from django.apps import AppConfig


class ActivityLogsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "activity_logs"
    verbose_name = "Activity logs"
