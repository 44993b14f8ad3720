import django.core.serializers.json
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("boards", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Activity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("activity_type", models.CharField(choices=[("board_created", "Board created"), ("board_updated", "Board updated"), ("board_deleted", "Board deleted"), ("portfolio_created", "Portfolio created"), ("list_created", "List created"), ("list_updated", "List updated"), ("list_deleted", "List deleted"), ("card_created", "Card created"), ("card_updated", "Card updated"), ("card_deleted", "Card deleted"), ("card_moved", "Card moved"), ("card_assigned", "Card assigned"), ("checklist_created", "Checklist created"), ("checklist_completed", "Checklist completed"), ("task_completed", "Task completed"), ("task_assigned", "Task assigned"), ("subtask_completed", "Subtask completed"), ("subtask_assigned", "Subtask assigned"), ("comment_created", "Comment created"), ("member_invited", "Member invited"), ("member_joined", "Member joined"), ("member_removed", "Member removed"), ("user_registered", "User registered")], max_length=40)),
                ("entity_type", models.CharField(choices=[("board", "Board"), ("list", "List"), ("card", "Card"), ("checklist", "Checklist"), ("checklist_item", "Checklist item"), ("comment", "Comment"), ("user", "User"), ("portfolio", "Portfolio")], max_length=32)),
                ("entity_id", models.BigIntegerField(blank=True, null=True)),
                ("description", models.TextField()),
                ("metadata", models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ("timestamp", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("board", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="activities", to="boards.board")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="activities", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "activity",
                "verbose_name_plural": "activities",
                "db_table": "activities",
                "ordering": ["-timestamp", "-id"],
                "indexes": [
                    models.Index(fields=["user", "timestamp"], name="activity_user_ts_idx"),
                    models.Index(fields=["board", "timestamp"], name="activity_board_ts_idx"),
                    models.Index(fields=["activity_type"], name="activity_type_idx"),
                ],
            },
        ),
    ]
