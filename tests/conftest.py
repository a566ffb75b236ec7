import json

import numpy as np
import pytest

from memory_prompts.storage.sqlite_store import SQLiteStore

FAMILY_OUTPUT = "1. ¿Qué recuerdas de tu familia?\n2. ¿Quién te cuidaba?\n"


@pytest.fixture
def tmp_db(tmp_path):
    return tmp_path / "test_prompts.db"


@pytest.fixture
async def storage(tmp_db):
    store = SQLiteStore(tmp_db)
    yield store
    await store.close()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


class MockChat:
    """Chat model double that answers by keyword match on the user message.

    A response may be a string or an exception instance, which is raised.
    Every call is recorded as ``(messages, temperature)``.
    """

    def __init__(self, responses: dict[str, object] | None = None):
        self.responses = {
            "Genera": FAMILY_OUTPUT,
            "palabras clave": json.dumps(["familia", "recuerdos", "infancia"]),
        }
        if responses:
            self.responses.update(responses)
        self.calls: list[tuple[list[dict], float]] = []

    def __call__(self, messages: list[dict], temperature: float) -> str:
        self.calls.append((messages, temperature))
        user = messages[-1]["content"]
        for keyword, response in self.responses.items():
            if keyword.lower() in user.lower():
                if isinstance(response, Exception):
                    raise response
                return response
        return ""

    def calls_matching(self, keyword: str) -> list[tuple[list[dict], float]]:
        return [c for c in self.calls if keyword.lower() in c[0][-1]["content"].lower()]


def make_mock_llm(responses: dict[str, object] | None = None) -> MockChat:
    return MockChat(responses)


@pytest.fixture
def mock_llm():
    return make_mock_llm()
