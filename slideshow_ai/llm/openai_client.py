import os
from dotenv import load_dotenv

# Load .env / .env.local once at import
load_dotenv(dotenv_path=os.path.join(os.getcwd(), ".env"))
load_dotenv(dotenv_path=os.path.join(os.getcwd(), ".env.local"))

from openai import AsyncOpenAI

_client = None


def get_openai_client() -> AsyncOpenAI:
    global _client
    if _client is None:
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY missing (set it in .env or .env.local)")
        _client = AsyncOpenAI(api_key=api_key)
    return _client
