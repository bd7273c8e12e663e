from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import CompanyTransactionViewSet

router = DefaultRouter()
router.register(r"", CompanyTransactionViewSet, basename="company-transactions")

urlpatterns = [
    path("", include(router.urls)),
]
