from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Lead delivery
    lead_webhook_url: str = ""
    # Per-variant override, e.g. {"bridging": "https://hooks.example.com/..."}
    lead_webhook_urls: dict[str, str] = {}

    # Rate tables: directory of <variant>.json files replacing the built-in sheets
    rate_table_dir: str = ""

    # App
    debug: bool = False
    log_level: str = "INFO"

    def webhook_url_for(self, variant: str) -> str:
        return self.lead_webhook_urls.get(variant) or self.lead_webhook_url


settings = Settings()
