from .auth_service import AuthService
from .catalog_service import CatalogService
from .sessions import RevocableSessions, StatelessSessions

__all__ = ['AuthService', 'CatalogService', 'RevocableSessions', 'StatelessSessions']
