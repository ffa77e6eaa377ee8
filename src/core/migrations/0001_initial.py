from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Branch",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150, unique=True)),
                ("address", models.CharField(max_length=255)),
                ("manager", models.CharField(max_length=150)),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Item",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(editable=False, max_length=20, unique=True)),
                ("name", models.CharField(max_length=150)),
                ("item_type", models.CharField(choices=[("Normal Item", "Normal Item"), ("Grocery Item", "Grocery Item"), ("Machine", "Machine")], max_length=20)),
                ("category", models.CharField(max_length=100)),
                ("subcategory", models.CharField(blank=True, default="", max_length=100)),
                ("price", models.DecimalField(decimal_places=2, max_digits=18)),
                ("description", models.TextField(blank=True, default="")),
                ("sold_by_weight", models.BooleanField(default=False)),
                ("notify_expiry", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["item_type", "name"],
                "indexes": [models.Index(fields=["item_type", "name"], name="item_type_name_idx")],
                "constraints": [models.CheckConstraint(condition=models.Q(("price__gte", 0)), name="item_price_non_negative")],
            },
        ),
    ]
