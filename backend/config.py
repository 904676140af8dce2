import os
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional, Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8001
DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TRANSCRIPTION_MODEL = "whisper-1"
DEFAULT_SUMMARY_MODEL = "gpt-4"
DEFAULT_MAX_UPLOAD_MB = 100


def _optional(value: Optional[str]) -> Optional[str]:
    # Unset, empty and the literal "undefined" all mean "not configured".
    if value is None:
        return None
    value = value.strip()
    return value if value and value != "undefined" else None


@dataclass(frozen=True)
class Config:
    """Explicit settings handed to adapter factories. Nothing reads the environment later."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    debug: bool = False
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    transcription_model: str = DEFAULT_TRANSCRIPTION_MODEL
    transcription_language: Optional[str] = "en"
    summary_model: str = DEFAULT_SUMMARY_MODEL
    summary_temperature: float = 0.3
    summary_max_tokens: int = 2000
    proxy_url: Optional[str] = None
    proxy_token: Optional[str] = None
    request_timeout: Optional[float] = None
    max_upload_mb: int = DEFAULT_MAX_UPLOAD_MB

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "Config":
        env = os.environ if environ is None else environ
        timeout = _optional(env.get("REQUEST_TIMEOUT"))
        return cls(
            host=env.get("HOST", DEFAULT_HOST),
            port=int(env.get("PORT", DEFAULT_PORT)),
            debug=env.get("DEBUG", "0") == "1",
            api_key=_optional(env.get("OPENAI_API_KEY")),
            base_url=env.get("OPENAI_BASE_URL", DEFAULT_BASE_URL),
            transcription_model=env.get("TRANSCRIPTION_MODEL", DEFAULT_TRANSCRIPTION_MODEL),
            transcription_language=_optional(env.get("TRANSCRIPTION_LANGUAGE", "en")),
            summary_model=env.get("SUMMARY_MODEL", DEFAULT_SUMMARY_MODEL),
            summary_temperature=float(env.get("SUMMARY_TEMPERATURE", "0.3")),
            summary_max_tokens=int(env.get("SUMMARY_MAX_TOKENS", "2000")),
            proxy_url=_optional(env.get("PROXY_SERVER_URL")),
            proxy_token=_optional(env.get("PROXY_SERVER_ACCESS_TOKEN")),
            request_timeout=float(timeout) if timeout else None,
            max_upload_mb=int(env.get("MAX_UPLOAD_MB", DEFAULT_MAX_UPLOAD_MB)),
        )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "base_url": self.base_url,
            "transcription_model": self.transcription_model,
            "transcription_language": self.transcription_language,
            "summary_model": self.summary_model,
            "forwarding": self.proxy_url is not None,
            "has_api_key": self.api_key is not None,
            "request_timeout": self.request_timeout,
            "max_upload_mb": self.max_upload_mb,
        }


@lru_cache(maxsize=1)
def get_config() -> Config:
    load_dotenv()
    return Config.from_env()


def create_http_transport(cfg: Config):
    """Pick the outbound request strategy once: forwarded when a proxy is configured."""
    if cfg.proxy_url:
        from adapters.http.forwarding import ForwardingHttpAdapter
        transport = ForwardingHttpAdapter(
            cfg.proxy_url, access_token=cfg.proxy_token, timeout=cfg.request_timeout
        )
    else:
        from adapters.http.direct import DirectHttpAdapter
        transport = DirectHttpAdapter(timeout=cfg.request_timeout)

    logger.info(f"HTTP transport: {type(transport).__name__}")
    return transport


def create_provider_adapters(cfg: Config, http):
    """Create transcription and summary adapters bound to the given transport."""
    from adapters.openai import WhisperTranscriptionAdapter, ChatCompletionSummaryAdapter

    transcription = WhisperTranscriptionAdapter(
        http,
        api_key=cfg.api_key,
        base_url=cfg.base_url,
        model=cfg.transcription_model,
        language=cfg.transcription_language,
    )
    summary = ChatCompletionSummaryAdapter(
        http,
        api_key=cfg.api_key,
        base_url=cfg.base_url,
        model=cfg.summary_model,
        temperature=cfg.summary_temperature,
        max_tokens=cfg.summary_max_tokens,
    )
    if not cfg.api_key:
        logger.warning("OPENAI_API_KEY not set; provider calls will fail until configured")
    logger.info(f"Provider adapters: transcription={cfg.transcription_model}, summary={cfg.summary_model}")
    return transcription, summary


def create_audio_adapter():
    """Create the audio decoding adapter (always soundfile + FFmpeg)."""
    from adapters.ffmpeg.audio import FFmpegAudioAdapter
    return FFmpegAudioAdapter()


def create_progress_adapter():
    from adapters.local.log_progress import LogProgressAdapter
    return LogProgressAdapter()


def create_source_resolver(http):
    from adapters.remote.http_source import HttpSourceResolver
    return HttpSourceResolver(http)


def create_use_case(cfg: Config):
    """Wire the full pipeline from explicit configuration."""
    from adapters.local.fixed_run_speakers import FixedRunSpeakerAssigner
    from audio_normalizer import AudioNormalizer
    from summary_interpreter import SummaryInterpreter
    from transcript_segmenter import TranscriptSegmenter
    from use_cases.process_submission import ProcessSubmissionUseCase

    http = create_http_transport(cfg)
    transcription, summary = create_provider_adapters(cfg, http)
    return ProcessSubmissionUseCase(
        normalizer=AudioNormalizer(create_audio_adapter()),
        transcription=transcription,
        segmenter=TranscriptSegmenter(FixedRunSpeakerAssigner()),
        interpreter=SummaryInterpreter(summary),
        progress=create_progress_adapter(),
        source_resolver=create_source_resolver(http),
    )
