"""Application-level services behind the HTTP routers."""

from .credentials import AuthResult, login, register
from .games import create_game, list_games
from .pledge_stats import pledge_stats
from .pledges import create_pledge, list_pledges, recent_pledges, user_pledges
from .posts import (
    create_post,
    delete_post,
    get_post,
    list_posts,
    list_user_posts,
    update_caption,
)
from .query_builder import ComposedQuery, PledgeFilters, build_game_query, build_pledge_query

__all__ = [
    "AuthResult",
    "login",
    "register",
    "create_game",
    "list_games",
    "pledge_stats",
    "create_pledge",
    "list_pledges",
    "recent_pledges",
    "user_pledges",
    "create_post",
    "delete_post",
    "get_post",
    "list_posts",
    "list_user_posts",
    "update_caption",
    "ComposedQuery",
    "PledgeFilters",
    "build_game_query",
    "build_pledge_query",
]
