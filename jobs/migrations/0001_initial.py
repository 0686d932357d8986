import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Cart",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cart",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Service Cart",
                "verbose_name_plural": "Service Carts",
            },
        ),
        migrations.CreateModel(
            name="CartItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "object_type",
                    models.CharField(
                        choices=[
                            ("car", "Car"),
                            ("driveway", "Driveway"),
                            ("lawn", "Lawn"),
                            ("street", "Street"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "job_size",
                    models.CharField(
                        choices=[
                            ("small", "Small"),
                            ("medium", "Medium"),
                            ("large", "Large"),
                            ("x-large", "Extra large"),
                        ],
                        default="small",
                        max_length=10,
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("image_ref", models.CharField(blank=True, max_length=500)),
                ("message", models.TextField(blank=True)),
                ("attributes", models.JSONField(blank=True, default=dict)),
                ("added_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "cart",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="items", to="jobs.cart"
                    ),
                ),
            ],
            options={
                "ordering": ["added_at"],
            },
        ),
        migrations.CreateModel(
            name="ActiveRequest",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("cart", models.JSONField(default=list)),
                ("address", models.JSONField(default=dict)),
                ("weather", models.JSONField(default=dict)),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=10)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("charge_id", models.CharField(max_length=255, unique=True)),
                ("charge_amount", models.PositiveIntegerField()),
                ("charge_currency", models.CharField(default="usd", max_length=3)),
                ("charge_created_at", models.DateTimeField()),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("accepted_at", models.DateTimeField(blank=True, null=True)),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "stage",
                    models.CharField(
                        choices=[("live", "Live"), ("accepted", "Accepted"), ("started", "Started")],
                        default="live",
                        max_length=20,
                    ),
                ),
                ("cancellation_count", models.PositiveIntegerField(default=0)),
                ("last_cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("payout_retry_count", models.PositiveIntegerField(default=0)),
                ("payout_failure_kind", models.CharField(blank=True, max_length=40)),
                ("payout_last_error", models.CharField(blank=True, max_length=255)),
                ("payout_failed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="active_requests",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "provider",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="accepted_requests",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["stage", "created_at"], name="request_stage_created_idx"),
                    models.Index(fields=["provider", "stage"], name="request_provider_stage_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CompletedRequest",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("cart", models.JSONField(default=list)),
                ("address", models.JSONField(default=dict)),
                ("weather", models.JSONField(default=dict)),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=10)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("charge_id", models.CharField(max_length=255, unique=True)),
                ("charge_amount", models.PositiveIntegerField()),
                ("charge_currency", models.CharField(default="usd", max_length=3)),
                ("charge_created_at", models.DateTimeField()),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("accepted_at", models.DateTimeField(blank=True, null=True)),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "stage",
                    models.CharField(
                        choices=[
                            ("live", "Live"),
                            ("accepted", "Accepted"),
                            ("started", "Started"),
                            ("completed", "Completed"),
                        ],
                        default="completed",
                        max_length=20,
                    ),
                ),
                ("completed_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("payout_amount", models.PositiveIntegerField()),
                ("transfer_id", models.CharField(blank=True, max_length=255)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="completed_requests",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "provider",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="completed_jobs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-completed_at"],
            },
        ),
    ]
