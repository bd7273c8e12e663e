from django.contrib import admin

from .models import CompanyTransaction, MemberTransaction


@admin.register(MemberTransaction)
class MemberTransactionAdmin(admin.ModelAdmin):
    list_display = ("transaction_code", "member", "type", "amount", "status", "due_date", "paid_date")
    list_filter = ("status", "type", "payment_method")
    search_fields = ("transaction_code", "member__name", "member__member_code")
    readonly_fields = ("transaction_code", "created_by", "created_at", "updated_at")


@admin.register(CompanyTransaction)
class CompanyTransactionAdmin(admin.ModelAdmin):
    list_display = ("transaction_code", "type", "category", "amount", "status", "transaction_date")
    list_filter = ("type", "status", "category")
    search_fields = ("transaction_code", "category", "description")
    readonly_fields = ("transaction_code", "created_by", "created_at", "updated_at")
