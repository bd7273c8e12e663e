from django.conf import settings
from django.db import models
from django.utils import timezone


class Member(models.Model):
    class Gender(models.TextChoices):
        MALE = "MALE", "Male"
        FEMALE = "FEMALE", "Female"
        OTHER = "OTHER", "Other"

    # Generated (MEMyyNNNN), never edited after creation
    member_code = models.CharField(max_length=20, unique=True, editable=False)

    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=30, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    gender = models.CharField(max_length=10, choices=Gender.choices, blank=True, null=True)
    birth_date = models.DateField(blank=True, null=True)
    emergency_contact = models.CharField(max_length=255, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    join_date = models.DateField(default=timezone.localdate)
    is_active = models.BooleanField(default=True, db_index=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="members_created",
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.name} ({self.member_code})"


class MemberAbsence(models.Model):
    class AbsenceType(models.TextChoices):
        SICK = "SICK", "Sick"
        VACATION = "VACATION", "Vacation"
        PERSONAL = "PERSONAL", "Personal"
        OTHER = "OTHER", "Other"

    member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name="absences")
    date = models.DateField(db_index=True)
    type = models.CharField(max_length=20, choices=AbsenceType.choices)
    reason = models.TextField(blank=True, null=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="absences_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-id"]

    def __str__(self):
        return f"{self.member_id} {self.type} {self.date}"
