from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("scheduling", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="event",
            name="everyone_responded_notified_at",
            field=models.DateTimeField(blank=True, null=True),
        ),
    ]
