"""
Management command to create the demo staff accounts and sample data
Usage: python manage.py seed_demo [--password PW] [--users-only]
"""
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from campaigns.models import Campaign, CampaignLog
from gymdesk.codes import (
    COMPANY_TRANSACTION_PREFIX,
    TRANSACTION_PREFIX,
    create_with_code,
    generate_member_code,
    generate_transaction_code,
)
from members.models import Member
from transactions.models import CompanyTransaction, MemberTransaction, PaymentMethod
from users.models import User
from users.permissions_matrix import ACCOUNTING, FRONT_OFFICE, MARKETING, OWNER, SUPERVISOR

DEMO_USERS = [
    {"user_id": "owner", "email": "owner@gym.com", "full_name": "Gym Owner", "role": OWNER},
    {"user_id": "frontoffice", "email": "frontoffice@gym.com", "full_name": "Front Office Staff", "role": FRONT_OFFICE},
    {"user_id": "accounting", "email": "accounting@gym.com", "full_name": "Accounting Staff", "role": ACCOUNTING},
    {"user_id": "marketing", "email": "marketing@gym.com", "full_name": "Marketing Staff", "role": MARKETING},
    {"user_id": "supervisor", "email": "supervisor@gym.com", "full_name": "Supervisor", "role": SUPERVISOR},
]

DEMO_MEMBERS = [
    {"name": "John Doe", "email": "john.doe@example.com", "phone": "+1234567890",
     "address": "123 Main St, City", "gender": Member.Gender.MALE},
    {"name": "Jane Smith", "email": "jane.smith@example.com", "phone": "+1234567891",
     "address": "456 Oak Ave, City", "gender": Member.Gender.FEMALE},
    {"name": "Mike Johnson", "email": "mike.j@example.com", "phone": "+1234567892",
     "address": "789 Pine Rd, City", "gender": Member.Gender.MALE},
]


class Command(BaseCommand):
    help = "Create the five demo staff users and a small set of sample gym data"

    def add_arguments(self, parser):
        parser.add_argument("--password", default="password123", help="Password for every demo user")
        parser.add_argument("--users-only", action="store_true", help="Skip sample members, transactions and campaigns")

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS("\n=== Seeding demo data ===\n"))

        with transaction.atomic():
            staff = self._seed_users(options["password"])
            if options["users_only"]:
                self.stdout.write("Skipping sample data (--users-only)")
            elif Member.objects.exists():
                self.stdout.write("  - Members already exist, sample data skipped")
            else:
                self._seed_sample_data(staff)

        self.stdout.write(self.style.SUCCESS("\nSeed completed\n"))

    def _seed_users(self, password):
        self.stdout.write("Creating users...")
        staff = {}
        for spec in DEMO_USERS:
            user = User.objects.filter(user_id=spec["user_id"]).first()
            if user is None:
                user = User.objects.create_user(password=password, **spec)
                self.stdout.write(self.style.SUCCESS(f"  ✓ Created: {user.user_id} ({user.role})"))
            else:
                self.stdout.write(f"  - User already exists: {user.user_id}")
            staff[spec["role"]] = user
        return staff

    def _create_member_tx(self, **fields):
        return create_with_code(
            lambda **code: MemberTransaction.objects.create(**code, **fields),
            lambda: generate_transaction_code(TRANSACTION_PREFIX),
            "transaction_code",
        )

    def _seed_sample_data(self, staff):
        front, accounting, marketing = staff[FRONT_OFFICE], staff[ACCOUNTING], staff[MARKETING]
        now = timezone.now()
        today = timezone.localdate()

        members = []
        for spec in DEMO_MEMBERS:
            members.append(Member.objects.create(member_code=generate_member_code(), created_by=front, **spec))
        self.stdout.write(self.style.SUCCESS(f"  ✓ Created {len(members)} members"))

        self._create_member_tx(
            member=members[0],
            type=MemberTransaction.TxType.MEMBERSHIP_FEE,
            amount=Decimal("50.00"),
            description="Monthly membership fee",
            payment_method=PaymentMethod.CREDIT_CARD,
            status=MemberTransaction.Status.COMPLETED,
            due_date=today,
            paid_date=now,
            created_by=front,
        )
        self._create_member_tx(
            member=members[1],
            type=MemberTransaction.TxType.PERSONAL_TRAINING,
            amount=Decimal("100.00"),
            description="Personal training session package",
            payment_method=PaymentMethod.CASH,
            status=MemberTransaction.Status.PENDING,
            due_date=today + timedelta(days=7),
            created_by=front,
        )
        self.stdout.write(self.style.SUCCESS("  ✓ Created sample member transactions"))

        company_rows = [
            (CompanyTransaction.TxType.INCOME, "Membership Fees", "5000.00", "Monthly membership fees collection", PaymentMethod.BANK_TRANSFER),
            (CompanyTransaction.TxType.EXPENSE, "Rent", "2000.00", "Monthly gym rent", PaymentMethod.BANK_TRANSFER),
            (CompanyTransaction.TxType.EXPENSE, "Equipment", "500.00", "New dumbbells purchase", PaymentMethod.CREDIT_CARD),
        ]
        for tx_type, category, amount, description, method in company_rows:
            fields = dict(
                type=tx_type,
                category=category,
                amount=Decimal(amount),
                description=description,
                payment_method=method,
                status=CompanyTransaction.Status.COMPLETED,
                transaction_date=now,
                created_by=accounting,
            )
            create_with_code(
                lambda **code: CompanyTransaction.objects.create(**code, **fields),
                lambda: generate_transaction_code(COMPANY_TRANSACTION_PREFIX),
                "transaction_code",
            )
        self.stdout.write(self.style.SUCCESS("  ✓ Created sample company transactions"))

        campaign = Campaign.objects.create(
            name="Summer Fitness Challenge",
            description="Get fit this summer with our special program",
            type=Campaign.CampaignType.EVENT,
            status=Campaign.Status.ACTIVE,
            budget=Decimal("1000.00"),
            start_date=today,
            end_date=today + timedelta(days=30),
            target_audience="All members",
            goals="Increase member engagement and retention",
            created_by=marketing,
        )
        CampaignLog.objects.create(
            campaign=campaign,
            activity="Campaign Launch",
            description="Launched summer fitness challenge campaign",
            metrics={"reach": 500, "engagement": 50, "signups": 10},
            log_date=now,
            created_by=marketing,
        )
        self.stdout.write(self.style.SUCCESS("  ✓ Created sample campaigns and logs"))
