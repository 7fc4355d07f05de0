from .friendships import FriendshipService
from .feed import FeedService
from .posts import PostService
from .users import UserService


__all__ = ["FriendshipService", "FeedService", "PostService", "UserService"]
