"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

from technicals.schemas.technical import IndicatorParameters, ScoringProfile


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "StockPro Technicals"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Momentum
    rsi_period: int = 14
    rsi_overbought: float = 70.0
    rsi_oversold: float = 30.0
    stochastic_k_period: int = 14
    stochastic_d_period: int = 3
    stochastic_overbought: float = 80.0
    stochastic_oversold: float = 20.0

    # MACD
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9

    # Bollinger Bands
    bollinger_period: int = 20
    bollinger_std_dev: float = 2.0

    # Trend strength buckets (% gap between short and long averages)
    trend_weak_gap: float = 2.0
    trend_strong_gap: float = 5.0

    # Composite scoring profile
    weight_trend: float = 0.30
    weight_momentum: float = 0.25
    weight_macd: float = 0.25
    weight_volatility: float = 0.20
    buy_threshold: float = 0.2
    strong_threshold: float = 0.6

    # Batch analysis
    batch_max_concurrency: int = 8

    def indicator_parameters(self) -> IndicatorParameters:
        """Indicator windows and zone thresholds as a validated parameter set."""
        return IndicatorParameters(
            rsi_period=self.rsi_period,
            rsi_overbought=self.rsi_overbought,
            rsi_oversold=self.rsi_oversold,
            stochastic_k_period=self.stochastic_k_period,
            stochastic_d_period=self.stochastic_d_period,
            stochastic_overbought=self.stochastic_overbought,
            stochastic_oversold=self.stochastic_oversold,
            macd_fast=self.macd_fast,
            macd_slow=self.macd_slow,
            macd_signal=self.macd_signal,
            bollinger_period=self.bollinger_period,
            bollinger_std_dev=self.bollinger_std_dev,
            trend_weak_gap=self.trend_weak_gap,
            trend_strong_gap=self.trend_strong_gap,
        )

    def scoring_profile(self) -> ScoringProfile:
        """Composite weights and thresholds as a validated profile."""
        return ScoringProfile(
            weight_trend=self.weight_trend,
            weight_momentum=self.weight_momentum,
            weight_macd=self.weight_macd,
            weight_volatility=self.weight_volatility,
            buy_threshold=self.buy_threshold,
            strong_threshold=self.strong_threshold,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
