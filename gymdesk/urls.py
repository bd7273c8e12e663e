# gymdesk/urls.py
from django.contrib import admin
from django.urls import include, path

from gymdesk.views import dashboard_stats, health

urlpatterns = [
    path("admin/", admin.site.urls),

    # Health
    path("health/", health, name="health"),
    path("api/health/", health, name="api_health"),

    # Dashboard tiles
    path("api/dashboard/stats/", dashboard_stats, name="dashboard_stats"),

    # App routers
    path("api/users/", include("users.urls")),
    path("api/members/", include("members.urls")),
    path("api/member-absences/", include("members.absence_urls")),
    path("api/member-transactions/", include("transactions.urls")),
    path("api/company-transactions/", include("transactions.company_urls")),
    path("api/campaigns/", include("campaigns.urls")),
    path("api/campaign-logs/", include("campaigns.log_urls")),
    path("api/activity-logs/", include("activity_logs.urls")),
    path("api/analytics/", include("analytics.urls")),
]
