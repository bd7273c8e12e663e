from django.contrib import admin

from .models import Campaign, CampaignLog


class CampaignLogInline(admin.TabularInline):
    model = CampaignLog
    extra = 0
    fields = ("log_date", "activity", "metrics")


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "status", "budget", "start_date", "end_date")
    list_filter = ("type", "status")
    search_fields = ("name", "description")
    readonly_fields = ("created_by", "created_at", "updated_at")
    inlines = [CampaignLogInline]


@admin.register(CampaignLog)
class CampaignLogAdmin(admin.ModelAdmin):
    list_display = ("campaign", "activity", "log_date")
    list_filter = ("log_date",)
    search_fields = ("activity", "campaign__name")
