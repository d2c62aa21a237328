# techmarket/middleware/db_middleware.py

from techmarket.utils.database import AsyncSessionLocal


class DBSessionMiddleware:
    """
    Request-scoped AsyncSession on request.state.db.

    Services commit explicitly; anything left uncommitted when the
    request raises is rolled back, and the session is closed after
    the response has gone out.
    """

    def __init__(self, app, session_factory=AsyncSessionLocal):
        self.app = app
        self.session_factory = session_factory

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        async with self.session_factory() as session:
            scope.setdefault("state", {})["db"] = session
            try:
                await self.app(scope, receive, send)
            except Exception:
                await session.rollback()
                raise
