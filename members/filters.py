import django_filters

from .models import Member, MemberAbsence


class MemberFilter(django_filters.FilterSet):
    # ?active=true -> active members only
    active = django_filters.BooleanFilter(field_name="is_active")
    gender = django_filters.ChoiceFilter(choices=Member.Gender.choices)

    class Meta:
        model = Member
        fields = ["active", "gender"]


class MemberAbsenceFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="date", lookup_expr="lte")

    class Meta:
        model = MemberAbsence
        fields = ["member", "type", "date_from", "date_to"]
