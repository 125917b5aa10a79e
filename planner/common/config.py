from pydantic import BaseModel
import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    chat_enabled: bool = _env_bool("CHAT_ENABLED", "true")

    # model czatu (dowolny endpoint zgodny z OpenAI, domyślnie Deepseek)
    ai_api_key: str = os.getenv("AI_API_KEY", "")
    ai_base_url: str = os.getenv("AI_BASE_URL", "https://api.deepseek.com")
    ai_model: str = os.getenv("AI_MODEL", "deepseek-chat")
    ai_provider: str = os.getenv("AI_PROVIDER", "deepseek")
    ai_max_tokens: int = int(os.getenv("AI_MAX_TOKENS", "4096"))
    ai_temperature: float = float(os.getenv("AI_TEMPERATURE", "0.7"))

    # cennik w USD za 1M tokenów
    ai_price_input_per_m: float = float(os.getenv("AI_PRICE_INPUT_PER_M", "0.14"))
    ai_price_output_per_m: float = float(os.getenv("AI_PRICE_OUTPUT_PER_M", "0.28"))

    session_expiry_seconds: int = int(os.getenv("SESSION_EXPIRY_SECONDS", str(24 * 60 * 60)))
    chat_last_messages: int = int(os.getenv("CHAT_LAST_MESSAGES", "5"))


settings = Settings()
