import django.core.serializers.json
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("session_id", models.CharField(blank=True, default="", max_length=255)),
                ("action", models.CharField(choices=[("CREATE", "Create"), ("READ", "Read"), ("UPDATE", "Update"), ("DELETE", "Delete"), ("LOGIN", "Login"), ("LOGOUT", "Logout"), ("ASSIGN", "Assign"), ("UNASSIGN", "Unassign"), ("COMPLETE", "Complete"), ("UNCOMPLETE", "Uncomplete"), ("PERMISSION_CHANGE", "Permission change"), ("PASSWORD_CHANGE", "Password change"), ("UPLOAD", "Upload"), ("VIEW", "View")], max_length=32)),
                ("entity_type", models.CharField(choices=[("user", "User"), ("board", "Board"), ("list", "List"), ("card", "Card"), ("checklist", "Checklist"), ("checklist_item", "Checklist item"), ("comment", "Comment"), ("label", "Label"), ("portfolio", "Portfolio"), ("notification", "Notification"), ("session", "Session"), ("system", "System")], max_length=32)),
                ("entity_id", models.CharField(blank=True, max_length=100, null=True)),
                ("ip_address", models.CharField(blank=True, default="", max_length=64)),
                ("user_agent", models.TextField(blank=True, default="")),
                ("old_data", models.JSONField(blank=True, encoder=django.core.serializers.json.DjangoJSONEncoder, null=True)),
                ("new_data", models.JSONField(blank=True, encoder=django.core.serializers.json.DjangoJSONEncoder, null=True)),
                ("metadata", models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ("timestamp", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="audit_logs", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "audit log",
                "verbose_name_plural": "audit logs",
                "db_table": "audit_logs",
                "ordering": ["-timestamp", "-id"],
                "indexes": [
                    models.Index(fields=["action", "timestamp"], name="audit_action_ts_idx"),
                    models.Index(fields=["entity_type", "entity_id"], name="audit_entity_idx"),
                    models.Index(fields=["user", "timestamp"], name="audit_user_ts_idx"),
                ],
            },
        ),
    ]
