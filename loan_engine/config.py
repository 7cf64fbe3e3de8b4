from decimal import Decimal

from pydantic_settings import BaseSettings


class EngineSettings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "LOAN_ENGINE_"}

    # Simulation window; long enough to detect payoff on slow loans
    simulation_months: int = 360
    default_max_months: int = 36

    # Payment consistency
    consistency_months: int = 12
    consistency_ratio_cap: Decimal = Decimal("1.4")

    # Subscriptions with no explicit count assume a fresh yearly cycle
    default_subscription_payment_count: int = 12

    # Strategy candidates below this outstanding are treated as paid off
    strategy_min_outstanding: Decimal = Decimal("0.005")


settings = EngineSettings()
