from .sql_driver import SQLDriver


class DatabaseManager:
    _instance = None

    def __init__(self, settings):
        self.sql = SQLDriver(
            settings.DATABASE_URL,
            async_url=settings.ASYNC_DATABASE_URL,
            echo=settings.DATABASE_ECHO,
        )

    @classmethod
    def get_instance(cls, settings=None):
        if cls._instance is None:
            if settings is None:
                from datarepo.config import settings as app_settings
                settings = app_settings
            cls._instance = cls(settings)
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Forget the singleton so the next get_instance() rebuilds it (settings changed, tests)."""
        cls._instance = None
