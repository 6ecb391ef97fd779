import uuid

from django.db import migrations, models


STATUS_CHOICES = [
    ("in-closet", "In closet"),
    ("listed", "Listed"),
    ("for-sale", "For sale"),
    ("otw", "On the way"),
    ("sold", "Sold"),
    ("traded", "Traded"),
    ("scammed", "Scammed"),
    ("refunded", "Refunded"),
    ("archive-hold", "Archive hold"),
]

PAID_BY_CHOICES = [
    ("PartnerA", "Partner A"),
    ("PartnerB", "Partner B"),
    ("Shared", "Shared"),
]

ENTRY_KIND_CHOICES = [
    ("PURCHASE", "Purchase"),
    ("SALE", "Sale"),
    ("TRADE", "Trade"),
    ("REFUND", "Refund"),
    ("CONTRIBUTION", "Contribution"),
]


def _money(**kwargs):
    return models.DecimalField(decimal_places=2, max_digits=12, **kwargs)


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="InventoryItemRecord",
            fields=[
                (
                    "item_id",
                    models.CharField(max_length=64, primary_key=True, serialize=False),
                ),
                ("created_at", models.DateTimeField()),
                ("name", models.CharField(max_length=255)),
                ("brand", models.CharField(blank=True, max_length=255, null=True)),
                ("category", models.CharField(default="other", max_length=64)),
                ("size", models.CharField(blank=True, max_length=64, null=True)),
                ("acquisition_cost", _money()),
                ("asking_price", _money(blank=True, null=True)),
                ("lowest_acceptable_price", _money(blank=True, null=True)),
                ("goal_price", _money(blank=True, null=True)),
                ("sale_price", _money(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=STATUS_CHOICES,
                        default="in-closet",
                        max_length=20,
                    ),
                ),
                ("date_added", models.DateField(blank=True, null=True)),
                ("date_sold", models.DateField(blank=True, null=True)),
                (
                    "paid_by",
                    models.CharField(
                        choices=PAID_BY_CHOICES,
                        default="Shared",
                        max_length=20,
                    ),
                ),
                (
                    "traded_for_item_id",
                    models.CharField(blank=True, max_length=64, null=True),
                ),
                ("trade_cash_difference", _money(blank=True, null=True)),
                ("in_convention", models.BooleanField(default=False)),
                ("ever_in_convention", models.BooleanField(default=False)),
                ("platform", models.CharField(default="none", max_length=32)),
                (
                    "platform_sold",
                    models.CharField(blank=True, max_length=32, null=True),
                ),
                ("source", models.CharField(blank=True, max_length=255, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "image_url",
                    models.URLField(blank=True, max_length=1024, null=True),
                ),
                ("priority_sale", models.BooleanField(default=False)),
            ],
            options={
                "db_table": "inventory_items",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="idx_item_status"),
                    models.Index(
                        fields=["in_convention"], name="idx_item_in_convention",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CapitalAccountRecord",
            fields=[
                (
                    "singleton_key",
                    models.PositiveSmallIntegerField(
                        default=1, primary_key=True, serialize=False,
                    ),
                ),
                ("cash_on_hand", _money(default=0)),
                ("partner_a_investment", _money(default=0)),
                ("partner_b_investment", _money(default=0)),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
                ("version", models.PositiveIntegerField(default=0)),
            ],
            options={
                "db_table": "capital_accounts",
            },
        ),
        migrations.CreateModel(
            name="LedgerEntryRecord",
            fields=[
                (
                    "entry_id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "kind",
                    models.CharField(choices=ENTRY_KIND_CHOICES, max_length=20),
                ),
                ("amount", _money()),
                ("idempotency_key", models.CharField(max_length=255, unique=True)),
                ("item_id", models.CharField(blank=True, max_length=64, null=True)),
                ("memo", models.CharField(blank=True, default="", max_length=255)),
                ("recorded_at", models.DateTimeField()),
                ("sequence", models.PositiveBigIntegerField(unique=True)),
            ],
            options={
                "db_table": "ledger_entries",
                "ordering": ["sequence"],
            },
        ),
        migrations.CreateModel(
            name="ContributionRecord",
            fields=[
                (
                    "contribution_id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "partner",
                    models.CharField(choices=PAID_BY_CHOICES, max_length=20),
                ),
                ("amount", _money()),
                ("contributed_on", models.DateField()),
                (
                    "description",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                (
                    "reference",
                    models.CharField(
                        blank=True, max_length=64, null=True, unique=True,
                    ),
                ),
            ],
            options={
                "db_table": "capital_contributions",
                "ordering": ["-contributed_on"],
            },
        ),
    ]
