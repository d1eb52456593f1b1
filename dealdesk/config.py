from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "DEALDESK_"}

    # App
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # Terminal client
    api_base_url: str = "http://localhost:8000"

    # Sales tax, percent by registration state.
    # Out-of-state deals collect at most the dealer home state's rate (reciprocity).
    state_tax_rates: dict[str, Decimal] = {
        "MI": Decimal("6"),
        "OH": Decimal("5.75"),
        "IN": Decimal("7"),
    }
    default_dealer_state: str = "MI"

    # OTD LTV warning bands shown on the deal desk
    ltv_warn: Decimal = Decimal("115")
    ltv_danger: Decimal = Decimal("125")
    ltv_critical: Decimal = Decimal("135")


settings = Settings()
