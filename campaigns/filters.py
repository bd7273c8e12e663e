import django_filters

from .models import Campaign, CampaignLog


class CampaignFilter(django_filters.FilterSet):
    starts_after = django_filters.DateFilter(field_name="start_date", lookup_expr="gte")
    starts_before = django_filters.DateFilter(field_name="start_date", lookup_expr="lte")

    class Meta:
        model = Campaign
        fields = ["status", "type", "starts_after", "starts_before"]


class CampaignLogFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name="log_date", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="log_date", lookup_expr="date__lte")

    class Meta:
        model = CampaignLog
        fields = ["campaign", "date_from", "date_to"]
