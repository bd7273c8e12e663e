import django_filters

from .models import CompanyTransaction, MemberTransaction


class MemberTransactionFilter(django_filters.FilterSet):
    due_from = django_filters.DateFilter(field_name="due_date", lookup_expr="gte")
    due_to = django_filters.DateFilter(field_name="due_date", lookup_expr="lte")

    class Meta:
        model = MemberTransaction
        fields = ["member", "status", "type", "payment_method", "due_from", "due_to"]


class CompanyTransactionFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name="transaction_date", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="transaction_date", lookup_expr="date__lte")
    category = django_filters.CharFilter(lookup_expr="iexact")

    class Meta:
        model = CompanyTransaction
        fields = ["type", "status", "category", "payment_method", "date_from", "date_to"]
