# forum/models/notification.py
import uuid
from tortoise import fields, models

NOTIFICATION_TYPES = ("answer_posted", "comment_posted", "mention")

class Notification(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    recipient_user = fields.ForeignKeyField("models.User", related_name="notifications", on_delete=fields.CASCADE)
    type = fields.CharField(max_length=32)  # One of NOTIFICATION_TYPES
    reference_id = fields.UUIDField()  # e.g. the answer a comment was posted on
    message = fields.CharField(max_length=512)
    link = fields.CharField(max_length=512, null=True)  # Client-side route, e.g. "/answer/<id>"
    is_read = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "notifications"
