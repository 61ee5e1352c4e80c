"""VK chat bot relaying messages to LLM completion APIs."""


def create_app(**kwargs):
    from .main import create_app as _create_app

    return _create_app(**kwargs)


def run():
    from .main import run as _run

    return _run()


__all__ = ["create_app", "run"]
