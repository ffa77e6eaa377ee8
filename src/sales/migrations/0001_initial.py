import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="GrocerySale",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("item_code", models.CharField(max_length=20)),
                ("item_name", models.CharField(blank=True, default="", max_length=150)),
                ("date", models.DateField()),
                ("sold_qty", models.DecimalField(decimal_places=3, max_digits=18)),
                ("total_cash", models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                ("branch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="grocery_sales", to="core.branch")),
            ],
            options={
                "ordering": ["-date", "-timestamp"],
                "indexes": [
                    models.Index(fields=["branch", "date"], name="grocery_sale_branch_date_idx"),
                    models.Index(fields=["date"], name="grocery_sale_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="GroceryReturn",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("item_code", models.CharField(max_length=20)),
                ("item_name", models.CharField(blank=True, default="", max_length=150)),
                ("date", models.DateField()),
                ("returned_qty", models.DecimalField(decimal_places=3, max_digits=18)),
                ("reason", models.CharField(default="waste", max_length=100)),
                ("completed", models.BooleanField(default=True)),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                ("branch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="grocery_returns", to="core.branch")),
            ],
            options={
                "ordering": ["-date", "-timestamp"],
                "indexes": [
                    models.Index(fields=["branch", "date"], name="grocery_return_branch_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="MachineBatch",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("start_value", models.PositiveIntegerField()),
                ("end_value", models.PositiveIntegerField(blank=True, null=True)),
                ("status", models.CharField(choices=[("active", "Active"), ("completed", "Completed")], default="active", max_length=10)),
                ("start_time", models.DateTimeField(auto_now_add=True)),
                ("end_time", models.DateTimeField(blank=True, null=True)),
                ("branch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="machine_batches", to="core.branch")),
                ("machine", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="machine_batches", to="core.item")),
            ],
            options={
                "ordering": ["-start_time", "-id"],
                "indexes": [
                    models.Index(fields=["branch", "date", "status"], name="machine_batch_lookup_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("status", "active")), fields=("machine", "branch"), name="machine_batch_one_active"),
                ],
            },
        ),
        migrations.CreateModel(
            name="MachineSale",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("machine_code", models.CharField(max_length=20)),
                ("machine_name", models.CharField(blank=True, default="", max_length=150)),
                ("date", models.DateField()),
                ("start_value", models.PositiveIntegerField()),
                ("end_value", models.PositiveIntegerField()),
                ("sold_qty", models.PositiveIntegerField()),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=18)),
                ("total_cash", models.DecimalField(decimal_places=2, max_digits=18)),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                ("batch", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="sale", to="sales.machinebatch")),
                ("branch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="machine_sales", to="core.branch")),
            ],
            options={
                "ordering": ["-date", "-timestamp"],
                "indexes": [
                    models.Index(fields=["branch", "date"], name="machine_sale_branch_date_idx"),
                    models.Index(fields=["date"], name="machine_sale_date_idx"),
                ],
            },
        ),
    ]
