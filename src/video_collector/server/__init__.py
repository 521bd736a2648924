from .app import create_app, KeywordNotFoundError

__all__ = ['create_app', 'KeywordNotFoundError']
