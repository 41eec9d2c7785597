from app.models.channel import Channel
from app.models.message import Attachment, Message
from app.models.post import Post
from app.models.user import User

__all__ = [
    "Attachment",
    "Channel",
    "Message",
    "Post",
    "User",
]
