from __future__ import annotations

import datetime
from collections.abc import Awaitable, Callable

from chat_relay.core.errors import MalformedUserInput, NotFound
from chat_relay.core.ids import parse_item_id
from chat_relay.core.text import normalize_spaces
from chat_relay.infra.transport import InboundMessage
from chat_relay.services.style_service import STYLE_PROMPTS, STYLE_TITLES

CommandHandler = Callable[[object, InboundMessage], Awaitable[str]]

UNKNOWN_COMMAND_TEXT = "❓ Неизвестная команда. Используйте /help для получения списка команд."

HELP_HEADER = """🤖 *ИИ-Ассистент*

*Возможности:*
• 💻 Программирование и код-ревью
• 🧮 Математические вычисления
• 🌐 Переводы текстов
• 📝 Написание и редактирование текстов
• 🤔 Ответы на общие вопросы
• 🎓 Обучение и объяснения"""

BASE_COMMANDS_HELP = [
    "/start - начать работу",
    "/help - показать помощь",
    "/stats - статистика использования",
    "/debug - переключить режим отладки",
    "/test - проверить работу бота",
]
TASK_COMMANDS_HELP = [
    "/add <текст> - добавить задачу",
    "/remove <номер> - удалить задачу",
    "/toggle <номер> - отметить задачу выполненной или снять отметку",
    "/list - показать список задач",
]
STYLE_COMMANDS_HELP = [
    "/style [стиль] - выбрать стиль ответов",
]


def _mode(ctx) -> str:
    config = getattr(ctx, "config", None)
    return str(getattr(config, "mode", "chat") or "chat")


def _item_id_from_args(args: str, usage: str) -> int:
    item_id = parse_item_id(args)
    if item_id is None:
        raise MalformedUserInput(f"❓ Неверный номер задачи. Использование: {usage}")
    return item_id


async def cmd_start(ctx, message: InboundMessage) -> str:
    return (
        "🤖 *Добро пожаловать!*\n\n"
        f"Привет, {message.user_name}! Я ИИ-ассистент.\n"
        "Просто напишите мне любое сообщение, и я отвечу!\n\n"
        "Используйте /help для получения дополнительной информации."
    )


async def cmd_help(ctx, message: InboundMessage) -> str:
    lines = list(BASE_COMMANDS_HELP)
    mode = _mode(ctx)
    if mode == "tasks":
        lines.extend(TASK_COMMANDS_HELP)
    elif mode == "styles":
        lines.extend(STYLE_COMMANDS_HELP)
    return f"{HELP_HEADER}\n\n*Команды:*\n" + "\n".join(lines) + "\n\nПросто напишите ваш вопрос!"


async def cmd_stats(ctx, message: InboundMessage) -> str:
    count = await ctx.state.message_count(message.user_id)
    debug = ctx.services["settings"].debug
    lines = [
        "📊 *Ваша статистика:*",
        "",
        f"Сообщений отправлено: {count}",
        f"Пользователь ID: {message.user_id}",
        f"Режим отладки: {'включен' if debug else 'выключен'}",
    ]
    mode = _mode(ctx)
    if mode == "styles":
        style = await ctx.services["styles"].style_for(message.user_id)
        lines.append(f"Стиль ответов: {STYLE_TITLES[style]}")
    elif mode == "tasks":
        open_count = await ctx.state.tasks_for(message.user_id).count_open()
        lines.append(f"Открытых задач: {open_count}")
    lines.extend(["", "Спасибо за использование бота! 🚀"])
    return "\n".join(lines)


async def cmd_debug(ctx, message: InboundMessage) -> str:
    enabled = ctx.services["settings"].toggle_debug()
    return f"🔧 Режим отладки {'включен' if enabled else 'выключен'}"


async def cmd_test(ctx, message: InboundMessage) -> str:
    return "✅ Бот работает нормально! Время: " + datetime.datetime.now().strftime("%H:%M:%S")


async def cmd_style(ctx, message: InboundMessage) -> str:
    styles = ctx.services["styles"]
    if not message.command_args:
        current = await styles.style_for(message.user_id)
        options = "\n".join(f"/style {key} - {STYLE_TITLES[key]}" for key in STYLE_PROMPTS)
        return f"🎨 Текущий стиль: {STYLE_TITLES[current]}\n\nДоступные стили:\n{options}"
    style = await styles.set_style(message.user_id, message.command_args)
    return f"✅ Стиль ответов изменен: {STYLE_TITLES[style]}"


async def cmd_add(ctx, message: InboundMessage) -> str:
    text = normalize_spaces(message.command_args)
    if not text:
        raise MalformedUserInput("❓ Использование: /add <текст задачи>")
    item = await ctx.state.tasks_for(message.user_id).add_item(text)
    return f"✅ Задача добавлена под номером {item.id}"


async def cmd_remove(ctx, message: InboundMessage) -> str:
    item_id = _item_id_from_args(message.command_args, "/remove <номер>")
    if not await ctx.state.tasks_for(message.user_id).remove_item(item_id):
        raise NotFound(f"❓ Задача {item_id} не найдена")
    return f"🗑️ Задача {item_id} удалена"


async def cmd_toggle(ctx, message: InboundMessage) -> str:
    item_id = _item_id_from_args(message.command_args, "/toggle <номер>")
    if not await ctx.state.tasks_for(message.user_id).toggle_item(item_id):
        raise NotFound(f"❓ Задача {item_id} не найдена")
    return f"🔄 Статус задачи {item_id} изменен"


async def cmd_list(ctx, message: InboundMessage) -> str:
    return await ctx.state.tasks_for(message.user_id).list_items()


BASE_COMMANDS: dict[str, CommandHandler] = {
    "start": cmd_start,
    "help": cmd_help,
    "stats": cmd_stats,
    "debug": cmd_debug,
    "test": cmd_test,
}
TASK_COMMANDS: dict[str, CommandHandler] = {
    "add": cmd_add,
    "remove": cmd_remove,
    "toggle": cmd_toggle,
    "list": cmd_list,
}
STYLE_COMMANDS: dict[str, CommandHandler] = {
    "style": cmd_style,
}


def build_command_table(mode: str) -> dict[str, CommandHandler]:
    table = dict(BASE_COMMANDS)
    if mode == "tasks":
        table.update(TASK_COMMANDS)
    elif mode == "styles":
        table.update(STYLE_COMMANDS)
    return table
