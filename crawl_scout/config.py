# === FILE: crawl_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации CrawlScout.
Используется Pydantic для описания схемы и проверки данных: параметры сервиса,
настройки HTTP-клиента и тела запросов /api/crawl и /api/scrape.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Annotated, Any, Union

import yaml
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator

from crawl_scout.utils import clamp, is_http_url

USER_AGENT = "TomfooleryCrawler/1.0 (+https://example.com)"
ACCEPT_HTML = "text/html,application/xhtml+xml"

MIN_PAGES, MAX_PAGES, DEFAULT_PAGES = 1, 20, 5
MIN_DEPTH, MAX_DEPTH, DEFAULT_DEPTH = 0, 3, 1

INVALID_URL_MESSAGE = "Invalid or missing URL"


class FetcherConfig(BaseModel):
    """Параметры HTTP-клиента, которые передаются в Fetcher явно."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field(USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    accept: str = Field(ACCEPT_HTML, min_length=1, description="Заголовок Accept.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    max_redirects: int = Field(5, ge=0, description="Максимум переходов по редиректам.")


class ServiceConfig(BaseModel):
    """Конфигурация HTTP-сервиса."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = Field("0.0.0.0", description="Адрес для прослушивания.")
    port: int = Field(4000, ge=1, le=65535, description="Порт HTTP-сервиса.")
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Origin'ы, которым разрешены CORS-запросы.",
    )
    events_url: str = Field("https://chn.tum.de/events", description="Страница со списком событий.")
    fetcher: FetcherConfig = Field(default_factory=FetcherConfig)

    @field_validator("events_url")
    @classmethod
    def _check_events_url(cls, v: str) -> str:
        if not is_http_url(v):
            raise ValueError(f"events_url must be an http(s) URL, got {v!r}")
        return v


def _check_url(value: Any) -> str:
    if not is_http_url(value):
        raise ValueError(INVALID_URL_MESSAGE)
    return value.strip()


RequestUrl = Annotated[str, BeforeValidator(_check_url)]


def _as_int(value: Any, fallback: int) -> int:
    """Числовое значение или *fallback* для пустых и нечисловых входных данных."""
    if isinstance(value, bool):
        return int(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if number != number or number in (float("inf"), float("-inf")):
        return fallback
    return int(number) or fallback


class ScrapeRequest(BaseModel):
    """Тело запроса POST /api/scrape."""
    model_config = ConfigDict(extra="ignore")

    url: RequestUrl


class CrawlRequest(BaseModel):
    """Тело запроса POST /api/crawl; лимиты приводятся к допустимым границам."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    url: RequestUrl
    max_pages: int = Field(DEFAULT_PAGES, alias="maxPages")
    max_depth: int = Field(DEFAULT_DEPTH, alias="maxDepth")
    same_domain: bool = Field(True, alias="sameDomain")

    @field_validator("max_pages", mode="before")
    @classmethod
    def _clamp_pages(cls, v: Any) -> int:
        if v is None:
            return DEFAULT_PAGES
        return clamp(_as_int(v, MIN_PAGES), MIN_PAGES, MAX_PAGES)

    @field_validator("max_depth", mode="before")
    @classmethod
    def _clamp_depth(cls, v: Any) -> int:
        if v is None:
            return DEFAULT_DEPTH
        return clamp(_as_int(v, MIN_DEPTH), MIN_DEPTH, MAX_DEPTH)

    @field_validator("same_domain", mode="before")
    @classmethod
    def _truthy(cls, v: Any) -> bool:
        if v is None:
            return True
        if isinstance(v, str):
            return v.strip().lower() not in ("", "0", "false", "no", "off")
        return bool(v)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ServiceConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект ServiceConfig.
    Без явного пути использует configs/default.yaml, а если его нет — значения по умолчанию.
    Явно указанный, но отсутствующий файл — FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ServiceConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return ServiceConfig(**data)


__all__ = [
    "FetcherConfig",
    "ServiceConfig",
    "CrawlRequest",
    "ScrapeRequest",
    "ValidationError",
    "load_config",
    "USER_AGENT",
    "INVALID_URL_MESSAGE",
]
