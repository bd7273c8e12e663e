from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import MemberAbsenceViewSet

router = DefaultRouter()
router.register(r"", MemberAbsenceViewSet, basename="member-absences")

urlpatterns = [
    path("", include(router.urls)),
]
