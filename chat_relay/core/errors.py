from __future__ import annotations


class RelayError(Exception):
    """Base error; ``user_message`` is what ends up in the chat."""

    default_user_message = "❌ Что-то пошло не так. Попробуйте еще раз позже."
    show_detail = True

    def __init__(self, message: str = "", *, user_message: str | None = None):
        super().__init__(message)
        if user_message:
            self.user_message = user_message
        elif message and self.show_detail:
            self.user_message = message
        else:
            self.user_message = self.default_user_message


class ProviderUnavailable(RelayError):
    default_user_message = "Сервис ИИ сейчас недоступен, попробуйте позже"
    show_detail = False


class ProviderRejected(RelayError):
    def __init__(self, status_code: int, body: str, *, max_chars: int = 500):
        self.status_code = int(status_code)
        self.body = body or ""
        shown = self.body.strip()
        if len(shown) > max_chars:
            shown = shown[:max_chars] + "..."
        super().__init__(f"API error (status {self.status_code}): {shown}")


class MalformedUserInput(RelayError):
    pass


class NotFound(RelayError):
    pass


class TransportDeliveryFailure(RelayError):
    pass


class ConfigurationError(RelayError):
    pass
