import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Activity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(db_index=True, max_length=30)),
                ("message", models.TextField()),
                ("branch", models.CharField(db_index=True, max_length=150)),
                ("timestamp", models.DateTimeField(db_index=True)),
                ("real_date", models.DateField(blank=True, null=True)),
                ("metadata", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name_plural": "activities",
                "ordering": ["-timestamp", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(db_index=True, max_length=30)),
                ("message", models.TextField()),
                ("item_code", models.CharField(blank=True, default="", max_length=20)),
                ("item_name", models.CharField(blank=True, default="", max_length=150)),
                ("batch_id", models.CharField(blank=True, default="", max_length=20)),
                ("quantity", models.DecimalField(blank=True, decimal_places=3, max_digits=18, null=True)),
                ("expiry_date", models.DateField(blank=True, null=True)),
                ("date_added", models.DateField(blank=True, null=True)),
                ("read_by", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("branch", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to="core.branch")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("type", "expiry")), fields=("type", "item_code", "branch", "batch_id", "expiry_date"), name="notification_expiry_dedup"),
                ],
            },
        ),
    ]
