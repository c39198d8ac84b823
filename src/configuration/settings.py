import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from src.domain.errors import ConfigurationError
from src.domain.field_map import DEFAULT_FIELD_MAP

DEFAULT_CONFIG_FILE = "jira.config.json"

# 설정 파일 키 → 환경 변수 (환경 변수가 있으면 파일 값보다 우선)
_ENV_OVERRIDES = {
    "host": "JIRA_HOST",
    "email": "JIRA_EMAIL",
    "apiToken": "JIRA_API_TOKEN",
    "workspace": "BITBUCKET_WORKSPACE",
    "bitbucketUsername": "BITBUCKET_USERNAME",
    "bitbucketToken": "BITBUCKET_TOKEN",
}

_REQUIRED_STRINGS = ("host", "email", "apiToken", "workspace")
_REQUIRED_LISTS = ("projectKeys", "specialProjectKeys", "internalProjectKeys")


def _load_env() -> None:
    app_env = os.getenv("APP_ENV")
    env_file = Path.cwd() / (f".env.{app_env}" if app_env else ".env")
    load_dotenv(env_file, override=False)


@dataclass(frozen=True)
class Settings:
    app_env: str
    config_path: str
    jira_host: str
    jira_email: str
    jira_api_token: str
    workspace: str
    project_keys: tuple[str, ...]
    special_project_keys: tuple[str, ...]
    internal_project_keys: tuple[str, ...]
    bitbucket_username: str
    bitbucket_token: str
    batch_size: int = 50
    delay_ms: int = 250
    highest_number: int = 15
    chunk_size: int = 50
    max_pages: int = 1000
    request_timeout: float = 30.0
    max_concurrency: int = 8
    marker_issue_type: str = "Project"
    summary_denylist: tuple[str, ...] = ("old", "deprecated")
    field_map: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_FIELD_MAP))
    output_path: str = "src/literals.generated.ts"
    build_command: str = "npm run build"
    build_cwd: str = "."
    build_timeout: float = 600.0
    derive_client_projects: bool = False
    strip_custom_fields: bool = False


def _read_config_file(path: Path) -> dict[str, Any]:
    """JSON 또는 YAML 설정 파일을 읽습니다."""
    if not path.is_file():
        raise ConfigurationError(f"설정 파일을 찾을 수 없습니다: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"설정 파일을 해석할 수 없습니다: {path} ({e})") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"설정 파일 최상위는 객체여야 합니다: {path}")
    return data


def _string_list(raw: dict[str, Any], key: str) -> tuple[str, ...]:
    value = raw[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"'{key}'는 문자열 목록이어야 합니다")
    return tuple(value)


def _number(raw: dict[str, Any], key: str, default: float, cast=int, minimum: float | None = None):
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"'{key}'는 숫자여야 합니다: {value!r}")
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"'{key}'는 {minimum} 이상이어야 합니다: {value!r}")
    return cast(value)


def _flag(raw: dict[str, Any], key: str) -> bool:
    value = raw.get(key, False)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def build_settings(config_path: str | None = None) -> Settings:
    _load_env()

    path = Path(config_path or os.getenv("JIRA_CONFIG_PATH") or Path.cwd() / DEFAULT_CONFIG_FILE)
    raw = _read_config_file(path)

    for key, env_name in _ENV_OVERRIDES.items():
        if os.getenv(env_name):
            raw[key] = os.environ[env_name]

    missing = [k for k in _REQUIRED_STRINGS if not isinstance(raw.get(k), str) or not raw[k].strip()]
    missing += [k for k in _REQUIRED_LISTS if raw.get(k) is None]
    if missing:
        raise ConfigurationError(f"필수 설정 누락: {', '.join(missing)} ({path})")

    field_map = raw.get("fieldMap", dict(DEFAULT_FIELD_MAP))
    if not isinstance(field_map, dict):
        raise ConfigurationError("'fieldMap'은 객체여야 합니다")

    denylist = raw.get("summaryDenylist", ["old", "deprecated"])
    if not isinstance(denylist, list):
        raise ConfigurationError("'summaryDenylist'는 문자열 목록이어야 합니다")

    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        config_path=str(path),
        jira_host=raw["host"],
        jira_email=raw["email"],
        jira_api_token=raw["apiToken"],
        workspace=raw["workspace"],
        project_keys=_string_list(raw, "projectKeys"),
        special_project_keys=_string_list(raw, "specialProjectKeys"),
        internal_project_keys=_string_list(raw, "internalProjectKeys"),
        bitbucket_username=raw.get("bitbucketUsername") or raw["email"],
        bitbucket_token=raw.get("bitbucketToken") or "",
        batch_size=_number(raw, "batchSize", 50, minimum=1),
        delay_ms=_number(raw, "delayMs", 250, minimum=0),
        highest_number=_number(raw, "highestNumber", 15, minimum=0),
        chunk_size=_number(raw, "chunkSize", 50, minimum=1),
        max_pages=_number(raw, "maxPages", 1000, minimum=1),
        request_timeout=_number(raw, "requestTimeout", 30.0, cast=float),
        max_concurrency=_number(raw, "maxConcurrency", 8, minimum=1),
        marker_issue_type=str(raw.get("markerIssueType", "Project")),
        summary_denylist=tuple(str(token) for token in denylist),
        field_map={str(k): str(v) for k, v in field_map.items()},
        output_path=str(raw.get("outputPath", "src/literals.generated.ts")),
        build_command=str(raw.get("buildCommand", "npm run build")),
        build_cwd=str(raw.get("buildCwd", ".")),
        build_timeout=_number(raw, "buildTimeout", 600.0, cast=float),
        derive_client_projects=_flag(raw, "deriveClientProjects"),
        strip_custom_fields=_flag(raw, "stripCustomFields"),
    )
