import os
from dataclasses import dataclass
from typing import Any, FrozenSet, Mapping, Optional
from dotenv import load_dotenv

load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Tenant routing
    BASE_DOMAIN = os.getenv("BASE_DOMAIN", "localhost:3000")
    SITE_PROTOCOL = os.getenv("SITE_PROTOCOL", "http")

    # Remote wiki
    MEDIAWIKI_API_URL = os.getenv("MEDIAWIKI_API_URL", "http://localhost:8080/api.php")
    WIKI_DOMAIN = os.getenv("WIKI_DOMAIN", BASE_DOMAIN)
    WIKI_FARM_API_URL = os.getenv("WIKI_FARM_API_URL")
    WIKI_REQUEST_TIMEOUT = float(os.getenv("WIKI_REQUEST_TIMEOUT", "15"))

    # Uploads
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(basedir, "uploads"))
    MAX_UPLOAD_BYTES = 10 * 1024 * 1024
    MAX_CONTENT_LENGTH = 12 * 1024 * 1024


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI") or \
        "sqlite:///" + os.path.join(basedir, "wikisites-dev.db")


class ProductionConfig(BaseConfig):
    DEBUG = False
    SITE_PROTOCOL = os.getenv("SITE_PROTOCOL", "https")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "testing-jwt-secret-with-enough-length"
    BASE_DOMAIN = "example.test"
    WIKI_DOMAIN = "wiki.example.test"
    MEDIAWIKI_API_URL = "http://wiki.example.test/api.php"
    WIKI_FARM_API_URL = None


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


ALLOWED_UPLOAD_MIME_TYPES = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
})


@dataclass(frozen=True)
class PlatformSettings:
    """
    Runtime settings resolved once by the application factory.

    Services receive this object instead of reading ``os.environ``
    or ``current_app.config`` on their own.
    """
    base_domain: str
    protocol: str
    default_wiki_api_url: str
    wiki_domain: str
    wiki_farm_api_url: Optional[str]
    request_timeout: float
    upload_folder: str
    max_upload_bytes: int
    allowed_mime_types: FrozenSet[str] = ALLOWED_UPLOAD_MIME_TYPES

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "PlatformSettings":
        return cls(
            base_domain=config["BASE_DOMAIN"],
            protocol=config["SITE_PROTOCOL"],
            default_wiki_api_url=config["MEDIAWIKI_API_URL"],
            wiki_domain=config["WIKI_DOMAIN"],
            wiki_farm_api_url=config.get("WIKI_FARM_API_URL"),
            request_timeout=float(config["WIKI_REQUEST_TIMEOUT"]),
            upload_folder=config["UPLOAD_FOLDER"],
            max_upload_bytes=int(config["MAX_UPLOAD_BYTES"]),
        )

    def site_url(self, subdomain: str) -> str:
        return f"{self.protocol}://{subdomain}.{self.base_domain}"

    def wiki_api_url_for(self, subdomain: str) -> str:
        return f"{self.protocol}://{subdomain}.{self.wiki_domain}/api.php"
