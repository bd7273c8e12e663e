from django.contrib import admin

from .models import Member, MemberAbsence


class MemberAbsenceInline(admin.TabularInline):
    model = MemberAbsence
    extra = 0
    fields = ("date", "type", "reason")


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ("member_code", "name", "email", "phone", "is_active", "join_date")
    list_filter = ("is_active", "gender")
    search_fields = ("member_code", "name", "email", "phone")
    readonly_fields = ("member_code", "created_by", "created_at", "updated_at")
    inlines = [MemberAbsenceInline]


@admin.register(MemberAbsence)
class MemberAbsenceAdmin(admin.ModelAdmin):
    list_display = ("member", "date", "type")
    list_filter = ("type", "date")
    search_fields = ("member__name", "member__member_code")
