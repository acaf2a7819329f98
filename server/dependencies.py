"""FastAPI Dependencies

Centralized dependency injection for reuse across all route modules.
Provides type-safe, testable access to shared resources.
"""

from fastapi import Request

from database.storage import Storage


def get_db(request: Request) -> Storage:
    """Dependency to get shared database instance from app state

    Usage in routes:
        @router.get("/endpoint")
        async def endpoint(db: Storage = Depends(get_db)):
            updates = await db.updates.search_updates(limit=10)
            return updates

    Benefits:
    - Type-safe database access (IDE autocomplete works)
    - Testable (override with a fake in tests)
    - Cleaner than manual request.app.state.db access
    """
    return request.app.state.db
