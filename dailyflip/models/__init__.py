from .users import User, Profile, Friendship
from .posts import Post, Comment


__all__ = ["User", "Profile", "Friendship", "Post", "Comment"]
