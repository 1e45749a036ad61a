from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

# Load .env file automatically
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    PayPal credentials are not part of the settings; operators enter them on
    the setup page and they live in the in-memory credential store.
    """

    # PayPal endpoints (sandbox only in this build)
    PAYPAL_BASE: str = "https://api-m.sandbox.paypal.com"
    PAYPAL_SDK_URL: str = "https://www.sandbox.paypal.com/sdk/js"
    PAYPAL_TIMEOUT_SECONDS: Optional[float] = None

    # Product image uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    MAX_PRODUCT_IMAGES: int = 5

    # App settings
    APP_NAME: str = "PayPal Instant Storefront"
    DEBUG: bool = False
    ENVIRONMENT: Literal["development", "test", "production"] = "development"

    # Metrics (Optional)
    METRICS_ENABLED: bool = True

    model_config = ConfigDict(env_file=".env", case_sensitive=True, extra="ignore")
