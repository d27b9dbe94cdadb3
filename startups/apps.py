from django.apps import AppConfig


class StartupsConfig(AppConfig):
    name = "startups"

    def ready(self):
        from . import checks  # noqa: F401
