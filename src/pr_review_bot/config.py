"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any
from pathlib import Path
import logging


class ConfigError(ValueError):
    """Missing or invalid configuration detected at startup."""


@dataclass(frozen=True)
class AuthContext:
    """외부 서비스 인증 정보 (로그에 남기지 않음)"""
    repo_token: str = field(repr=False)
    inference_api_key: str = field(repr=False)
    inference_endpoint: str
    model_deployment_name: str


@dataclass(frozen=True)
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = field(default=None, repr=False)
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30


@dataclass(frozen=True)
class InferenceConfig:
    """Azure OpenAI 추론 설정"""
    endpoint: Optional[str] = None
    api_key: Optional[str] = field(default=None, repr=False)
    deployment: Optional[str] = None
    api_version: str = "2024-02-01"
    model: str = "gpt-4o-mini"
    max_tokens: int = 500
    timeout_seconds: int = 30


@dataclass(frozen=True)
class ReviewConfig:
    """리뷰 생성 설정"""
    language: str = "TypeScript"
    framework: str = "NestJS"
    max_concurrent_files: int = 1
    background_workers: int = 4


@dataclass(frozen=True)
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass(frozen=True)
class ServerConfig:
    """웹훅 서버 설정"""
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False


# Sections that may be overridden from a YAML file. Secrets stay in the environment.
_YAML_SECTIONS = ("github", "inference", "review", "logging", "server")
_SECRET_FIELDS = {"token", "api_key"}


@dataclass(frozen=True)
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig
    inference: InferenceConfig
    review: ReviewConfig = field(default_factory=ReviewConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            github=GitHubConfig(
                token=os.getenv("GITHUB_TOKEN"),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
            ),
            inference=InferenceConfig(
                endpoint=os.getenv("AZURE_OPENAI_URL"),
                api_key=os.getenv("AZURE_OPENAI_API_KEY"),
                deployment=os.getenv("AZURE_OPENAI_DEPLOYMENT"),
                api_version=os.getenv("AZURE_OPENAI_API_VERSION", "2024-02-01"),
                model=os.getenv("AZURE_OPENAI_MODEL", "gpt-4o-mini"),
                max_tokens=int(os.getenv("OPENAI_MAX_TOKENS", "500")),
                timeout_seconds=int(os.getenv("OPENAI_TIMEOUT", "30")),
            ),
            review=ReviewConfig(
                language=os.getenv("REVIEW_LANGUAGE", "TypeScript"),
                framework=os.getenv("REVIEW_FRAMEWORK", "NestJS"),
                max_concurrent_files=int(os.getenv("MAX_CONCURRENT_FILES", "1")),
                background_workers=int(os.getenv("WEBHOOK_WORKERS", "4")),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            server=ServerConfig(
                host=os.getenv("HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "8000")),
                debug=os.getenv("DEBUG", "false").lower() == "true",
            ),
        )

    def with_yaml(self, config_path: str) -> "AppConfig":
        """YAML 파일의 값으로 비밀이 아닌 설정을 덮어씀"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        sections = {}
        for name in _YAML_SECTIONS:
            overrides = dict(config_data.get(name) or {})
            secrets = _SECRET_FIELDS & overrides.keys()
            if secrets:
                raise ConfigError(f"{name}.{sorted(secrets)[0]} must be provided through the environment")
            try:
                sections[name] = replace(getattr(self, name), **overrides)
            except TypeError as e:
                raise ConfigError(f"Invalid '{name}' section in {config_path}: {e}")

        return replace(self, **sections)

    @property
    def auth(self) -> AuthContext:
        """필수 인증 정보 묶음"""
        return AuthContext(
            repo_token=self.github.token,
            inference_api_key=self.inference.api_key,
            inference_endpoint=self.inference.endpoint,
            model_deployment_name=self.inference.deployment,
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # 필수 값 확인
        required = {
            "GITHUB_TOKEN": self.github.token,
            "AZURE_OPENAI_URL": self.inference.endpoint,
            "AZURE_OPENAI_API_KEY": self.inference.api_key,
            "AZURE_OPENAI_DEPLOYMENT": self.inference.deployment,
        }
        for name, value in required.items():
            if not value:
                errors.append(f"{name} is required")

        positive = {
            "github.timeout_seconds": self.github.timeout_seconds,
            "inference.timeout_seconds": self.inference.timeout_seconds,
            "inference.max_tokens": self.inference.max_tokens,
            "review.max_concurrent_files": self.review.max_concurrent_files,
            "review.background_workers": self.review.background_workers,
        }
        for name, value in positive.items():
            if value <= 0:
                errors.append(f"{name} must be positive")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ConfigError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'github': {
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                # 보안상 토큰은 제외
            },
            'inference': {
                'endpoint': self.inference.endpoint,
                'deployment': self.inference.deployment,
                'api_version': self.inference.api_version,
                'model': self.inference.model,
                'max_tokens': self.inference.max_tokens,
                'timeout_seconds': self.inference.timeout_seconds,
            },
            'review': {
                'language': self.review.language,
                'framework': self.review.framework,
                'max_concurrent_files': self.review.max_concurrent_files,
                'background_workers': self.review.background_workers,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'debug': self.server.debug,
            },
        }


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load and validate configuration.

    Raises ConfigError before anything is served when a required
    value is missing.
    """
    config = AppConfig.from_env()
    if config_path or os.getenv("PR_REVIEW_BOT_CONFIG"):
        config = config.with_yaml(config_path or os.getenv("PR_REVIEW_BOT_CONFIG"))
    config.validate()
    return config


def setup_logging(config: LoggingConfig) -> None:
    """로깅 설정"""
    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
    )

    # 파일 로깅이 설정된 경우 로테이션 설정
    if config.file_path:
        from logging.handlers import RotatingFileHandler

        handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        handler.setFormatter(logging.Formatter(config.format))

        # 루트 로거에 핸들러 추가
        root_logger = logging.getLogger()
        root_logger.addHandler(handler)
