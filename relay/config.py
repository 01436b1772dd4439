"""
Relay Configuration Management

This module provides configuration classes for the relay and its providers.
It handles configuration loading from YAML files with environment variable
substitution and precedence rules.

Configuration Precedence (highest to lowest):
1. Credential fields supplied with a request (applied by the dispatcher)
2. Explicit values in the config file (./.voice-relay/config.yaml or --config)
3. Environment variables (GROQ_API_KEY, OCI_*, RELAY_*, ...)
4. System defaults

The resulting RelayConfig is immutable and built once at process start.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple
from pathlib import Path
import yaml

from relay.errors import ConfigurationError


DEFAULT_CONFIG_PATH = ".voice-relay/config.yaml"


@dataclass(frozen=True)
class GCPConfig:
    """Configuration for the Google Cloud speech + translate provider.

    Attributes:
        credentials_path: Service-account JSON used by both Google clients
        language_code: Primary recognition language
        alternative_language_codes: Fallback recognition languages
        encoding: Encoding of the captured audio
        sample_rate_hertz: Sample rate of the captured audio
        source_language: Translation source language
        target_language: Translation target language
    """
    credentials_path: Optional[str] = None
    language_code: str = "ht-HT"
    alternative_language_codes: Tuple[str, ...] = ("fr-FR",)
    encoding: str = "WEBM_OPUS"
    sample_rate_hertz: int = 48000
    source_language: str = "ht"
    target_language: str = "en"

    def default_credentials(self) -> Dict[str, Optional[str]]:
        return {"gcpCredentialsPath": self.credentials_path}


@dataclass(frozen=True)
class GroqConfig:
    """Configuration for the Groq Whisper + Llama provider.

    Attributes:
        api_key: Groq API key
        transcription_model: Whisper model hosted on Groq
        translation_model: Chat model used for translation
        language: Whisper language hint
        translation_temperature: Sampling temperature for translation
        max_tokens: Completion token limit for translation
    """
    api_key: Optional[str] = None
    transcription_model: str = "whisper-large-v3"
    translation_model: str = "llama-3.3-70b-versatile"
    language: str = "ht"
    translation_temperature: float = 0.3
    max_tokens: int = 1024

    def default_credentials(self) -> Dict[str, Optional[str]]:
        return {"groqApiKey": self.api_key}


@dataclass(frozen=True)
class HuggingFaceConfig:
    """Configuration for the Groq Whisper + NLLB provider.

    Attributes:
        api_key: Hugging Face access token
        translation_model: NLLB model on the Inference API
        src_lang: NLLB source language tag
        tgt_lang: NLLB target language tag
    """
    api_key: Optional[str] = None
    translation_model: str = "facebook/nllb-200-distilled-600M"
    src_lang: str = "hat_Latn"
    tgt_lang: str = "eng_Latn"

    def default_credentials(self) -> Dict[str, Optional[str]]:
        return {"hfApiKey": self.api_key}


@dataclass(frozen=True)
class LlamaConfig:
    """Configuration for the pluggable Llama provider.

    Attributes:
        backend: 'groq' (raw HTTP to Groq) or 'replicate'
        groq_base_url: Base URL of Groq's OpenAI-compatible API
        replicate_api_token: Replicate API token
        replicate_whisper_model: Replicate Whisper model version
        replicate_llama_model: Replicate Llama instruct model
        temperature: Sampling temperature for translation
        max_tokens: Completion token limit for translation
    """
    backend: str = "groq"
    groq_base_url: str = "https://api.groq.com/openai/v1"
    replicate_api_token: Optional[str] = None
    replicate_whisper_model: str = (
        "openai/whisper:4d50797290df275329f202e48c76360b3f22b08d28c196cbc54600319435f8d2"
    )
    replicate_llama_model: str = "meta/meta-llama-3-70b-instruct"
    temperature: float = 0.3
    max_tokens: int = 1024

    def default_credentials(self) -> Dict[str, Optional[str]]:
        return {"replicateApiToken": self.replicate_api_token}


@dataclass(frozen=True)
class OCIConfig:
    """Configuration for the OCI speech + language provider.

    Attributes:
        config_path: OCI SDK config file
        profile: Profile inside the config file
        compartment_id: Compartment for jobs, buckets and translations
        bucket_name: Bucket used to stage audio and job output
        namespace: Object Storage namespace, looked up when unset
        language_code: Speech language; OCI has no Haitian Creole model
        translation_source: Source language for OCI Language translation
        domain: Speech model domain
        poll_interval: Seconds between job status checks
        max_wait: Seconds to wait for the job before timing out
    """
    config_path: Optional[str] = None
    profile: str = "DEFAULT"
    compartment_id: Optional[str] = None
    bucket_name: str = "creole-audio-bucket"
    namespace: Optional[str] = None
    language_code: str = "fr-FR"
    translation_source: str = "fr"
    domain: str = "GENERIC"
    poll_interval: float = 5.0
    max_wait: float = 300.0

    def default_credentials(self) -> Dict[str, Optional[str]]:
        return {"ociConfigPath": self.config_path, "ociProfile": self.profile}


@dataclass(frozen=True)
class RelayConfig:
    """Main configuration object for the relay.

    Attributes:
        default_provider: Provider used when a request names none
        temp_dir: Directory for uploaded and transcoded audio
        http_timeout: Timeout in seconds for every provider network client
        log_level: Logging level (debug, info, warning, error)
        gcp, groq, huggingface, llama, oci: Provider configurations
    """
    default_provider: str = "gcp"
    temp_dir: str = "audio_temp"
    http_timeout: float = 120.0
    log_level: str = "info"
    gcp: GCPConfig = field(default_factory=GCPConfig)
    groq: GroqConfig = field(default_factory=GroqConfig)
    huggingface: HuggingFaceConfig = field(default_factory=HuggingFaceConfig)
    llama: LlamaConfig = field(default_factory=LlamaConfig)
    oci: OCIConfig = field(default_factory=OCIConfig)

    def default_credentials(self) -> Dict[str, Optional[str]]:
        """Credential field defaults sourced from configuration/environment."""
        defaults: Dict[str, Optional[str]] = {}
        for provider_config in (self.gcp, self.groq, self.huggingface, self.llama, self.oci):
            defaults.update(provider_config.default_credentials())
        return defaults

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "RelayConfig":
        """Load configuration from an optional YAML file plus environment.

        Args:
            config_path: Path to config.yaml. When omitted, the default
                project path is used if it exists.

        Returns:
            RelayConfig instance

        Raises:
            ConfigurationError: If an explicit config file is missing or invalid
        """
        if config_path is None:
            if Path(DEFAULT_CONFIG_PATH).exists():
                return cls.load_from_yaml(DEFAULT_CONFIG_PATH)
            return cls.from_dict({})
        return cls.load_from_yaml(config_path)

    @classmethod
    def load_from_yaml(cls, config_path: str) -> "RelayConfig":
        """Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to config.yaml file

        Returns:
            RelayConfig instance with loaded configuration

        Raises:
            ConfigurationError: If config file doesn't exist or is invalid
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "RelayConfig":
        """Build configuration from parsed YAML data, environment and defaults."""
        resolve = cls._resolve_value
        gcp_data = config_data.get('gcp') or {}
        groq_data = config_data.get('groq') or {}
        hf_data = config_data.get('huggingface') or {}
        llama_data = config_data.get('llama') or {}
        oci_data = config_data.get('oci') or {}

        try:
            gcp = GCPConfig(
                credentials_path=resolve(gcp_data.get('credentials_path'), 'GOOGLE_APPLICATION_CREDENTIALS', None),
                language_code=resolve(gcp_data.get('language_code'), 'GCP_SPEECH_LANGUAGE', 'ht-HT'),
                alternative_language_codes=tuple(
                    gcp_data.get('alternative_language_codes') or ("fr-FR",)
                ),
                encoding=resolve(gcp_data.get('encoding'), 'GCP_SPEECH_ENCODING', 'WEBM_OPUS'),
                sample_rate_hertz=int(resolve(gcp_data.get('sample_rate_hertz'), 'GCP_SPEECH_SAMPLE_RATE', '48000')),
            )

            groq = GroqConfig(
                api_key=resolve(groq_data.get('api_key'), 'GROQ_API_KEY', None),
                transcription_model=resolve(groq_data.get('transcription_model'), 'GROQ_TRANSCRIPTION_MODEL', 'whisper-large-v3'),
                translation_model=resolve(groq_data.get('translation_model'), 'GROQ_TRANSLATION_MODEL', 'llama-3.3-70b-versatile'),
                translation_temperature=float(resolve(groq_data.get('translation_temperature'), 'GROQ_TRANSLATION_TEMPERATURE', '0.3')),
                max_tokens=int(resolve(groq_data.get('max_tokens'), 'GROQ_MAX_TOKENS', '1024')),
            )

            huggingface = HuggingFaceConfig(
                api_key=resolve(hf_data.get('api_key'), 'HF_API_KEY', None),
                translation_model=resolve(hf_data.get('translation_model'), 'HF_TRANSLATION_MODEL', 'facebook/nllb-200-distilled-600M'),
            )

            llama = LlamaConfig(
                backend=resolve(llama_data.get('backend'), 'LLAMA_PROVIDER', 'groq'),
                replicate_api_token=resolve(llama_data.get('replicate_api_token'), 'REPLICATE_API_TOKEN', None),
                temperature=float(resolve(llama_data.get('temperature'), 'LLAMA_TEMPERATURE', '0.3')),
                max_tokens=int(resolve(llama_data.get('max_tokens'), 'LLAMA_MAX_TOKENS', '1024')),
            )

            oci = OCIConfig(
                config_path=resolve(
                    oci_data.get('config_path'), 'OCI_CONFIG_PATH',
                    str(Path.home() / ".oci" / "config"),
                ),
                profile=resolve(oci_data.get('profile'), 'OCI_PROFILE', 'DEFAULT'),
                compartment_id=resolve(oci_data.get('compartment_id'), 'OCI_COMPARTMENT_ID', None),
                bucket_name=resolve(oci_data.get('bucket_name'), 'OCI_BUCKET_NAME', 'creole-audio-bucket'),
                namespace=resolve(oci_data.get('namespace'), 'OCI_NAMESPACE', None),
                poll_interval=float(resolve(oci_data.get('poll_interval'), 'OCI_POLL_INTERVAL', '5.0')),
                max_wait=float(resolve(oci_data.get('max_wait'), 'OCI_MAX_WAIT', '300')),
            )

            return cls(
                default_provider=resolve(config_data.get('default_provider'), 'RELAY_DEFAULT_PROVIDER', 'gcp'),
                temp_dir=resolve(config_data.get('temp_dir'), 'RELAY_TEMP_DIR', 'audio_temp'),
                http_timeout=float(resolve(config_data.get('http_timeout'), 'RELAY_HTTP_TIMEOUT', '120')),
                log_level=resolve(config_data.get('log_level'), 'RELAY_LOG_LEVEL', 'info'),
                gcp=gcp,
                groq=groq,
                huggingface=huggingface,
                llama=llama,
                oci=oci,
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration value: {e}")

    @staticmethod
    def _resolve_value(config_value: Any, env_var: str, default: Any) -> Any:
        """Resolve configuration value with precedence rules.

        Precedence (highest to lowest):
        1. Explicit config value (if not None and not empty string)
        2. Environment variable
        3. Default value

        Supports environment variable substitution syntax: ${VAR_NAME:-default}

        Args:
            config_value: Value from configuration file
            env_var: Environment variable name to check
            default: Default value if neither config nor env var is set

        Returns:
            Resolved configuration value
        """
        if isinstance(config_value, str) and '${' in config_value:
            # Pattern: ${VAR_NAME:-default_value} or ${VAR_NAME}
            pattern = r'\$\{([^}:]+)(?::-([^}]*))?\}'

            def replace_env_var(match):
                var_name = match.group(1)
                var_default = match.group(2) if match.group(2) is not None else ''
                return os.getenv(var_name, var_default)

            config_value = re.sub(pattern, replace_env_var, config_value)

            if config_value == '':
                config_value = None

        if config_value is not None and config_value != '':
            return config_value

        env_value = os.getenv(env_var)
        if env_value is not None and env_value != '':
            return env_value

        return default
