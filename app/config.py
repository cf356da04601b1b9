from pydantic_settings import BaseSettings, SettingsConfigDict
class Settings(BaseSettings):
    APP_ENV: str = "dev"
    BACKEND_URL: str = "http://localhost:5000/"
    PAYMENT_API_URL: str = "http://localhost:3000"
    # gateway credentials live behind the payment proxy
    ANZ_API_URL: str = "https://api.anzworldline-solutions.com.au"
    ANZ_API_KEY: str = ""
    ANZ_MERCHANT_ID: str = ""
    CURRENCY: str = "AUD"
    STORE_BACKEND: str = "json"  # json | sql | memory
    STORE_PATH: str = "data/customer-storage.json"
    DB_URL: str = "sqlite:///data/checkout.db"
    HTTP_TIMEOUT: float = 10.0
    FALLBACK_DELAY_SEC: float = 1.5
    SUCCESS_DELAY_SEC: float = 2.0
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str | None = None
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
settings = Settings()
