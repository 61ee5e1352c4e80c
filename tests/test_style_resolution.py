import pytest

from chat_relay.core.errors import MalformedUserInput
from chat_relay.repositories import PreferencesRepo
from chat_relay.services.style_service import STYLE_PROMPTS, StyleService
from tests.bot_fakes import MemoryPreferences


@pytest.mark.asyncio
async def test_unset_preference_uses_friendly_prompt():
    styles = StyleService(MemoryPreferences())
    assert await styles.system_prompt_for(1) == STYLE_PROMPTS["friendly"]


@pytest.mark.asyncio
async def test_meme_preference_uses_meme_prompt():
    styles = StyleService(MemoryPreferences({1: "meme"}))
    assert await styles.system_prompt_for(1) == STYLE_PROMPTS["meme"]


@pytest.mark.asyncio
async def test_unknown_stored_style_falls_back_to_friendly():
    styles = StyleService(MemoryPreferences({1: "pirate"}))
    assert await styles.style_for(1) == "friendly"
    assert await styles.system_prompt_for(1) == STYLE_PROMPTS["friendly"]


@pytest.mark.asyncio
async def test_no_store_means_friendly():
    assert await StyleService(None).system_prompt_for(42) == STYLE_PROMPTS["friendly"]


@pytest.mark.asyncio
async def test_set_style_rejects_unknown_value():
    store = MemoryPreferences()
    styles = StyleService(store)
    with pytest.raises(MalformedUserInput):
        await styles.set_style(1, "pirate")
    assert store.data == {}


@pytest.mark.asyncio
async def test_sqlite_preferences_upsert(tmp_path):
    repo = PreferencesRepo(str(tmp_path / "prefs" / "chat_relay.db"))
    await repo.init()

    assert await repo.get(5) is None
    await repo.set(5, "official")
    await repo.set(5, "meme")
    assert await repo.get(5) == "meme"

    styles = StyleService(repo)
    assert await styles.set_style(6, " Official ") == "official"
    assert await styles.system_prompt_for(6) == STYLE_PROMPTS["official"]
