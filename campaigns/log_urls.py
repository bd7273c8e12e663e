from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import CampaignLogViewSet

router = DefaultRouter()
router.register(r"", CampaignLogViewSet, basename="campaign-logs")

urlpatterns = [
    path("", include(router.urls)),
]
