from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from members.models import Member


class PaymentMethod(models.TextChoices):
    CASH = "CASH", "Cash"
    CREDIT_CARD = "CREDIT_CARD", "Credit card"
    DEBIT_CARD = "DEBIT_CARD", "Debit card"
    BANK_TRANSFER = "BANK_TRANSFER", "Bank transfer"
    DIGITAL_WALLET = "DIGITAL_WALLET", "Digital wallet"


class MemberTransaction(models.Model):
    class TxType(models.TextChoices):
        MEMBERSHIP_FEE = "MEMBERSHIP_FEE", "Membership fee"
        PERSONAL_TRAINING = "PERSONAL_TRAINING", "Personal training"
        SUPPLEMENTS = "SUPPLEMENTS", "Supplements"
        EQUIPMENT_RENTAL = "EQUIPMENT_RENTAL", "Equipment rental"
        OTHER = "OTHER", "Other"

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        COMPLETED = "COMPLETED", "Completed"
        CANCELLED = "CANCELLED", "Cancelled"
        OVERDUE = "OVERDUE", "Overdue"

    # Generated (TRX...), never edited after creation
    transaction_code = models.CharField(max_length=20, unique=True, editable=False)

    # a member with payment history cannot be deleted
    member = models.ForeignKey(Member, on_delete=models.PROTECT, related_name="transactions")
    type = models.CharField(max_length=30, choices=TxType.choices)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    description = models.TextField(blank=True, null=True)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices, blank=True, null=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True)

    due_date = models.DateField()
    paid_date = models.DateTimeField(blank=True, null=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="member_transactions_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.transaction_code} {self.amount} ({self.status})"


class CompanyTransaction(models.Model):
    class TxType(models.TextChoices):
        INCOME = "INCOME", "Income"
        EXPENSE = "EXPENSE", "Expense"

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        COMPLETED = "COMPLETED", "Completed"
        CANCELLED = "CANCELLED", "Cancelled"

    # Generated (CTRX...), never edited after creation
    transaction_code = models.CharField(max_length=20, unique=True, editable=False)

    type = models.CharField(max_length=10, choices=TxType.choices, db_index=True)
    category = models.CharField(max_length=100)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    description = models.TextField(blank=True, null=True)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices, blank=True, null=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.COMPLETED, db_index=True)
    transaction_date = models.DateTimeField(default=timezone.now, db_index=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="company_transactions_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-transaction_date", "-id"]

    def __str__(self):
        return f"{self.transaction_code} {self.type} {self.amount}"
