import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CashEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("expected", models.DecimalField(decimal_places=2, max_digits=18)),
                ("actual_cash", models.DecimalField(decimal_places=2, max_digits=18)),
                ("card_payment", models.DecimalField(decimal_places=2, default=0, max_digits=18)),
                ("actual", models.DecimalField(decimal_places=2, max_digits=18)),
                ("difference", models.DecimalField(decimal_places=2, max_digits=18)),
                ("status", models.CharField(choices=[("Match", "Match"), ("Overage", "Overage"), ("Shortage", "Shortage")], max_length=10)),
                ("operator_id", models.CharField(blank=True, default="", max_length=50)),
                ("operator_name", models.CharField(blank=True, default="", max_length=150)),
                ("notes", models.TextField(blank=True, default="")),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                ("branch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="cash_entries", to="core.branch")),
            ],
            options={
                "verbose_name_plural": "cash entries",
                "ordering": ["-date", "-timestamp"],
                "constraints": [
                    models.UniqueConstraint(fields=("branch", "date"), name="cash_entry_unique_branch_date"),
                ],
            },
        ),
    ]
