import django.db.models.deletion
from django.db import migrations, models

import stock.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StockEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("added", models.PositiveIntegerField(default=0)),
                ("returned", models.PositiveIntegerField(default=0)),
                ("transferred", models.PositiveIntegerField(default=0)),
                ("sold", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("branch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_entries", to="core.branch")),
                ("item", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_entries", to="core.item")),
            ],
            options={
                "ordering": ["date", "branch__name", "item__name"],
                "indexes": [
                    models.Index(fields=["date", "branch"], name="stock_entry_date_branch_idx"),
                    models.Index(fields=["item", "date"], name="stock_entry_item_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("date", "branch", "item"), name="stock_entry_unique_key"),
                ],
            },
        ),
        migrations.CreateModel(
            name="FinishedBatch",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("item_type", models.CharField(choices=[("Normal Item", "Normal Item"), ("Grocery Item", "Grocery Item"), ("Machine", "Machine")], default="Normal Item", max_length=20)),
                ("finished_at", models.DateTimeField(auto_now_add=True)),
                ("branch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="finished_batches", to="core.branch")),
            ],
            options={
                "ordering": ["-date", "branch__name"],
                "constraints": [
                    models.UniqueConstraint(fields=("date", "branch"), name="finished_batch_unique_key"),
                ],
            },
        ),
        migrations.CreateModel(
            name="GroceryBatch",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("batch_id", models.CharField(default=stock.models.generate_batch_code, max_length=20, unique=True)),
                ("quantity", models.DecimalField(decimal_places=3, max_digits=18)),
                ("remaining", models.DecimalField(decimal_places=3, max_digits=18)),
                ("expiry_date", models.DateField()),
                ("added_date", models.DateField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("branch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="grocery_batches", to="core.branch")),
                ("item", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="grocery_batches", to="core.item")),
            ],
            options={
                "ordering": ["expiry_date", "added_date", "id"],
                "indexes": [
                    models.Index(fields=["item", "branch", "expiry_date", "added_date"], name="grocery_batch_fifo_idx"),
                    models.Index(fields=["expiry_date"], name="grocery_batch_expiry_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("remaining__gte", 0)), name="grocery_remaining_non_negative"),
                    models.CheckConstraint(condition=models.Q(("remaining__lte", models.F("quantity"))), name="grocery_remaining_le_quantity"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TransferRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("item_type", models.CharField(choices=[("Normal Item", "Normal Item"), ("Grocery Item", "Grocery Item"), ("Machine", "Machine")], max_length=20)),
                ("items", models.JSONField(default=list)),
                ("processed_by", models.CharField(blank=True, default="", max_length=150)),
                ("processed_at", models.DateTimeField(auto_now_add=True)),
                ("receiver", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transfers_received", to="core.branch")),
                ("sender", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transfers_sent", to="core.branch")),
            ],
            options={
                "ordering": ["-processed_at", "-id"],
                "indexes": [
                    models.Index(fields=["date"], name="transfer_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("sender", models.F("receiver")), _negated=True), name="transfer_sender_ne_receiver"),
                ],
            },
        ),
    ]
