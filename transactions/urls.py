from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import MemberTransactionViewSet

router = DefaultRouter()
router.register(r"", MemberTransactionViewSet, basename="member-transactions")

urlpatterns = [
    path("", include(router.urls)),
]
