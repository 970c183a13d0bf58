from functions.config.settings import settings

__all__ = ["settings"]
