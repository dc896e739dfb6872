"""
API Routers, in dispatch priority order
- content: /api/content (operator)
- auth: /auth/signup, /auth/login, /auth/verify-token
- admin: /admin/login
- verification: /verify
- registration: /register
- users: /users, /users/accept, /users/deny (operator)
- static: file fallback
"""
from webgate.routers.content import router as content_router
from webgate.routers.auth import router as auth_router
from webgate.routers.admin import router as admin_router
from webgate.routers.verification import router as verification_router
from webgate.routers.registration import router as registration_router
from webgate.routers.users import router as users_router
from webgate.routers.static import router as static_router

ROUTERS = [
    content_router,
    auth_router,
    admin_router,
    verification_router,
    registration_router,
    users_router,
    static_router,
]

__all__ = [
    'content_router',
    'auth_router',
    'admin_router',
    'verification_router',
    'registration_router',
    'users_router',
    'static_router',
    'ROUTERS',
]
